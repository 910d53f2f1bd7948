"""Tk front-end for Rearrange Toolkit."""

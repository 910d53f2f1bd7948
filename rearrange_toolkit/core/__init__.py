"""Core (UI-free) layer: document model, name configuration and services."""

from .arrange_dialog import ArrangeDialog
from .attribute_dialog import AttributeNameDialog

__all__ = [
    "ArrangeDialog",
    "AttributeNameDialog",
]

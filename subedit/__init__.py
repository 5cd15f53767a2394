"""SubEdit: subtitle line selection and editing tools."""

__version__ = "0.3.0"

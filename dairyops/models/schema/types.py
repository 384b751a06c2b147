from sqlalchemy import Enum


def enum_type(enum_cls):
    """Store a Python enum by value in a plain VARCHAR column."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )

"""
Custom GraphQL scalars
"""

from typing import NewType

import strawberry

Cursor = strawberry.scalar(
    NewType("Cursor", str),
    name="Cursor",
    description="Opaque pagination cursor",
    serialize=str,
    parse_value=str,
)

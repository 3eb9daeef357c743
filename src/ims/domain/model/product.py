"""Product aggregate.

A product is identity only: an opaque id and a unique name.  It is
created together with its inventory row and never changes afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass

from ims.domain.exceptions import ValidationError
from ims.domain.model.value_objects import new_identifier


@dataclass(frozen=True)
class Product:

    id: str
    name: str

    @staticmethod
    def create(name: str) -> Product:
        """Create a new product with a freshly generated id."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        return Product(id=new_identifier(), name=name.strip())

"""Identifier types shared by the domain entities."""

from typing import Annotated

from pydantic import StringConstraints

# Products, warehouses and dealers are referenced by one normalized string.
# Pydantic strips it and rejects empty values wherever it is declared, so the
# engine never has to re-derive an id from some other shape.
EntityId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Free text that must not be blank, such as a customer's name or phone
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

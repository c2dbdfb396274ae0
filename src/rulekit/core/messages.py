"""Message template rendering.

Templates use ``{name}`` placeholders. Rendering is delegated to
pydantic-core so messages attached to models read exactly like the
messages pydantic produces for its own errors.
"""

from __future__ import annotations

from typing import Any

from pydantic_core import PydanticCustomError

# Label used for {field} when a value is validated outside a model
INPUT_VALUE_LABEL = "the input value"


def format_message(template: str, params: dict[str, Any] | None = None) -> str:
    """Render a message template.

    Placeholders without a matching parameter are left untouched.

    Args:
        template: Message template, e.g. "{field} must be no less than {min}.".
        params: Values for the placeholders.

    Returns:
        The rendered message.
    """
    if not params:
        return template
    # pydantic-core renders bools as 1/0
    context = {
        str(key): str(value) if isinstance(value, bool) else value
        for key, value in params.items()
    }
    return PydanticCustomError("rule_message", template, context).message()


def generate_attribute_label(attribute: str) -> str:
    """Turn an attribute name into a label ("first_name" -> "First Name")."""
    words = attribute.replace("-", " ").replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)

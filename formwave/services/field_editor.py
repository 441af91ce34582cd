from typing import Any, Callable, Dict, Optional

from formwave.schema.field_schema import Field, FieldWidth, FontSize, is_choice_type

# on_update(field_id, changes) -> updated field, or None if it no longer exists
UpdateCallback = Callable[[str, Dict[str, Any]], Optional[Field]]


class FieldEditor:
    """Property panel for one field.

    Every setter forwards its change immediately through ``on_update``; there
    is no separate commit step.
    """

    def __init__(self, field: Field, on_update: UpdateCallback):
        self.field = field
        self._on_update = on_update

    def _apply(self, changes: Dict[str, Any]) -> Field:
        updated = self._on_update(self.field.id, changes)
        if updated is not None:
            self.field = updated
        return self.field

    def _apply_styles(self, **changes) -> Field:
        styles = self.field.styles.model_copy(update=changes)
        return self._apply({"styles": styles})

    # properties

    def set_label(self, label: str) -> Field:
        return self._apply({"label": label})

    def set_placeholder(self, placeholder: str) -> Field:
        return self._apply({"placeholder": placeholder})

    def set_help_text(self, help_text: str) -> Field:
        return self._apply({"help_text": help_text})

    def set_default_value(self, default_value: str) -> Field:
        return self._apply({"default_value": default_value})

    def set_required(self, required: bool) -> Field:
        return self._apply({"required": bool(required)})

    # options

    @property
    def has_options(self) -> bool:
        return is_choice_type(self.field.type) and self.field.options is not None

    @property
    def can_remove_option(self) -> bool:
        return self.has_options and len(self.field.options) > 1

    def add_option(self) -> Field:
        if not self.has_options:
            return self.field
        options = list(self.field.options)
        options.append(f"Option {len(options) + 1}")
        return self._apply({"options": options})

    def remove_option(self, index: int) -> Field:
        # The last remaining option can't be removed
        if not self.can_remove_option or not 0 <= index < len(self.field.options):
            return self.field
        options = [option for i, option in enumerate(self.field.options) if i != index]
        return self._apply({"options": options})

    def update_option(self, index: int, text: str) -> Field:
        if not self.has_options or not 0 <= index < len(self.field.options):
            return self.field
        options = list(self.field.options)
        options[index] = text
        return self._apply({"options": options})

    # styles

    def set_width(self, width) -> Field:
        return self._apply_styles(width=FieldWidth(width).value)

    def set_font_size(self, font_size) -> Field:
        return self._apply_styles(font_size=FontSize(font_size).value)

    def set_text_color(self, color: Optional[str]) -> Field:
        return self._apply_styles(text_color=color)

    def set_background_color(self, color: Optional[str]) -> Field:
        return self._apply_styles(background_color=color)

    def set_border_color(self, color: Optional[str]) -> Field:
        return self._apply_styles(border_color=color)

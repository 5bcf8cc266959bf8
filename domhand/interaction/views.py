from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class InteractionOptions(BaseModel):
	"""Options shared by CLICK_ELEMENT and TYPE_IN_ELEMENT."""

	model_config = ConfigDict(populate_by_name=True, extra='ignore')

	right_click: bool = Field(False, alias='rightClick', description='Also fire a contextmenu event after the click.')
	clear_first: bool = Field(False, alias='clearFirst', description='Empty the field before typing.')
	human_delay: bool = Field(True, alias='humanDelay', description='Pause a jittered interval after each keystroke.')


class ScrollOptions(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra='ignore')

	x: float = 0
	y: float = 0
	behavior: Literal['smooth', 'auto', 'instant'] = 'smooth'
	selector: str | None = Field(None, description='Bring the first match into centered view instead of scrolling by x/y.')


class FormField(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra='ignore')

	# left raw so a malformed target fails its own field, not the whole batch
	target: Any = None
	value: Any = None
	kind: str | None = Field(None, validation_alias=AliasChoices('kind', 'type'))


class FieldResult(BaseModel):
	target: Any = None
	ok: bool
	error: str | None = None

	def to_payload(self) -> dict[str, Any]:
		return self.model_dump(mode='json', exclude_none=True)

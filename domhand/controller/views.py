from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from domhand.interaction.views import InteractionOptions, ScrollOptions


class CommandParams(BaseModel):
	"""Base for command parameter models. Unknown keys (including `type`) are ignored."""

	model_config = ConfigDict(populate_by_name=True, extra='ignore')


class NoParams(CommandParams):
	pass


class SnapshotOptions(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra='ignore')

	max_elements: int | None = Field(None, alias='maxElements', ge=0)
	include_hidden: bool = Field(False, alias='includeHidden')


class GetDomSnapshotParams(CommandParams):
	options: SnapshotOptions = Field(default_factory=SnapshotOptions)


class GetAccessibilityTreeParams(CommandParams):
	max_depth: int | None = Field(None, alias='maxDepth', ge=0)


class ClickElementParams(CommandParams):
	# target stays raw; the resolver reports a malformed one as InvalidTarget
	target: Any = None
	options: InteractionOptions = Field(default_factory=InteractionOptions)


class TypeInElementParams(CommandParams):
	target: Any = None
	text: str
	options: InteractionOptions = Field(default_factory=InteractionOptions)


class ScrollParams(CommandParams):
	options: ScrollOptions = Field(default_factory=ScrollOptions)


class FillFormParams(CommandParams):
	# entries are validated one at a time so a malformed field fails only itself
	fields: list[Any] = Field(default_factory=list)


class FindElementsParams(CommandParams):
	selector: str | None = None
	limit: int | None = Field(None, ge=0)


class WaitForSelectorParams(CommandParams):
	selector: str = Field(..., min_length=1)
	timeout: int | None = Field(None, ge=0, description='Milliseconds; defaults to DOMHAND_WAIT_TIMEOUT_MS.')


class EvaluateScriptParams(CommandParams):
	expression: str = Field(..., min_length=1)


class GetStorageParams(CommandParams):
	area: Literal['local', 'session'] = 'local'


class SetLogLevelParams(CommandParams):
	level: str

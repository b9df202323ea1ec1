from __future__ import annotations

from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .settings import get_settings

DEFAULT_DEBOUNCE_SECONDS = 2.0


class Immediate(BaseModel):
    """Every mutation is flushed synchronously before the write returns."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["immediate"] = "immediate"


class Debounced(BaseModel):
    """
    Trailing-edge debounce: a flush happens `seconds` after the last mutation,
    for whatever the value is at that moment.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["debounced"] = "debounced"
    seconds: float = Field(default=DEFAULT_DEBOUNCE_SECONDS, gt=0, allow_inf_nan=False)


class Manual(BaseModel):
    """Mutations never touch storage; call save()/load() explicitly."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["manual"] = "manual"


UpdatePolicy = Annotated[Union[Immediate, Debounced, Manual], Field(discriminator="kind")]

_POLICY_ADAPTER: TypeAdapter[UpdatePolicy] = TypeAdapter(UpdatePolicy)


def parse_policy(raw: str | Mapping[str, Any]) -> UpdatePolicy:
    """
    Build a policy from configuration.

    Accepts a mapping such as {"kind": "debounced", "seconds": 5} or one of the
    strings "immediate", "manual", "debounced" and "debounced:<seconds>".
    Raises ValueError for anything else.
    """
    if isinstance(raw, Mapping):
        return _POLICY_ADAPTER.validate_python(raw)

    kind, sep, arg = raw.strip().lower().partition(":")
    if kind == "debounced":
        seconds = float(arg) if arg.strip() else DEFAULT_DEBOUNCE_SECONDS
        return Debounced(seconds=seconds)
    if sep:
        raise ValueError(f"update policy {kind!r} takes no argument: {raw!r}")
    if kind == "immediate":
        return Immediate()
    if kind == "manual":
        return Manual()
    raise ValueError(f"unknown update policy: {raw!r}")


def default_policy() -> UpdatePolicy:
    return parse_policy(get_settings().update_policy)

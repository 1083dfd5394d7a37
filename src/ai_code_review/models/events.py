"""
Trigger Event Models

pull_request 이벤트 payload에서 리뷰 트리거를 추출한다.
지원하는 action은 opened / synchronize 두 가지뿐이고,
그 외의 action은 경계에서 UnsupportedEventError로 거부된다.
"""

from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


SUPPORTED_ACTIONS = ("opened", "synchronize")


class UnsupportedEventError(Exception):
    """리뷰 대상이 아닌 이벤트 action"""
    def __init__(self, action: Optional[str]):
        super().__init__(f"Unsupported event: {action}")
        self.action = action


class OpenedEvent(BaseModel):
    """PR 생성 이벤트: PR 전체 diff를 가져온다"""
    model_config = ConfigDict(frozen=True)

    action: Literal["opened"]


class SynchronizeEvent(BaseModel):
    """PR에 새 커밋이 push된 이벤트: before...after 비교 diff를 가져온다"""
    model_config = ConfigDict(frozen=True)

    action: Literal["synchronize"]
    before: str
    after: str

    @field_validator("before", "after")
    @classmethod
    def validate_commit_ref(cls, v):
        if not v.strip():
            raise ValueError("Commit reference cannot be empty")
        return v


TriggerEvent = Annotated[
    Union[OpenedEvent, SynchronizeEvent],
    Field(discriminator="action"),
]

_trigger_adapter = TypeAdapter(TriggerEvent)


def parse_trigger(payload: Mapping[str, Any]) -> Union[OpenedEvent, SynchronizeEvent]:
    """
    Parse the triggering event payload into a trigger variant.

    Args:
        payload: Raw pull_request event payload (webhook body or
            the JSON file referenced by GITHUB_EVENT_PATH)

    Returns:
        OpenedEvent or SynchronizeEvent

    Raises:
        UnsupportedEventError: If the action is not opened/synchronize
        pydantic.ValidationError: If a supported action lacks its fields
    """
    action = payload.get("action")
    if action not in SUPPORTED_ACTIONS:
        raise UnsupportedEventError(action)

    return _trigger_adapter.validate_python(dict(payload))

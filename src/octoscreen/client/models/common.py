"""Common models for the OctoScreen client."""

import typing

import pydantic
import structlog

logger = structlog.get_logger(__name__)


class WarnExtraFieldsModel(pydantic.BaseModel):
    """Base model that keeps unknown fields and logs a warning about them."""

    model_config = pydantic.ConfigDict(extra="allow")

    def model_post_init(self, context: typing.Any, /) -> None:
        """Warn about fields the model does not declare."""
        if self.__pydantic_extra__:
            logger.warning(
                f"Model {self.__class__.__name__} received unknown fields: {list(self.__pydantic_extra__.keys())}"
            )
            logger.debug("Unknown field values", extra=self.__pydantic_extra__)


def zero_if_null(v: typing.Any) -> typing.Any:
    """Map a JSON ``null`` onto the numeric zero value."""
    return 0.0 if v is None else v


ZeroFloat = typing.Annotated[float, pydantic.BeforeValidator(zero_if_null)]

"""Generator settings passed explicitly through the translator."""

from typing import Literal

from pydantic import BaseModel

DEFAULT_HOST_VARIABLE = "HTTP_HOST"
DEFAULT_FILENAME = "index"


class GeneratorConfig(BaseModel):
    """Options controlling how requests are rendered and named."""

    host_variable: str = DEFAULT_HOST_VARIABLE
    layout: Literal["flat", "nested"] = "flat"
    default_filename: str = DEFAULT_FILENAME
    include_parameters: bool = True
    strict: bool = False  # raise instead of degrading on irregular input

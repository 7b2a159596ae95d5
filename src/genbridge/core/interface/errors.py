"""Error types raised while translating wire responses."""


class ContentGenerationError(Exception):
    """Base error for all content generation failures raised by genbridge."""


class MalformedToolArgumentsError(ContentGenerationError, ValueError):
    """A wire tool call carried an argument string that is not a JSON object."""

    def __init__(self, function_name: str, raw_arguments: str, detail: str = "") -> None:
        self.function_name = function_name
        self.raw_arguments = raw_arguments
        msg = f"Malformed arguments for tool call: {function_name}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)

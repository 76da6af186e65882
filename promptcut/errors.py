"""Exception hierarchy shared by the validator, the editors and the web layer."""


class PromptCutError(Exception):
    """Base class for every failure a request can end with."""

    kind = "error"

    def to_dict(self) -> dict:
        return {"success": False, "error": str(self), "kind": self.kind}


class MalformedResponseError(PromptCutError):
    """The instruction service answered with something that is not a JSON object."""

    kind = "malformed_response"


class UnrecognizedActionError(PromptCutError):
    kind = "unrecognized_action"


class InvalidRangeError(PromptCutError):
    """A cut/split bound is missing, non-numeric, negative or out of order.

    ``index`` is the 0-based position of the offending pair for split plans.
    """

    kind = "invalid_range"

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.index is not None:
            data["index"] = self.index
        return data


class MediaProcessingError(PromptCutError):
    """ffmpeg/ffprobe failed for any reason."""

    kind = "media_processing"


class FFmpegNotFoundError(MediaProcessingError):
    pass


class ArtifactNotFoundError(PromptCutError):
    kind = "artifact_not_found"


class InstructionServiceError(PromptCutError):
    """The language model API could not be reached or returned an error."""

    kind = "instruction_service"

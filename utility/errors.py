class PrayerServiceError(Exception):
    """Base class for every error raised by the prayer service"""


class ConfigError(PrayerServiceError):
    pass


# -----------------------------
# Client input (HTTP 400)
# -----------------------------
class InvalidInput(PrayerServiceError):
    """Topic, writer or language not recognized"""

    reason = "Invalid input"

    def __init__(self, value: str = ""):
        self.value = value
        super().__init__(f"{self.reason}: {value}" if value else self.reason)


class InvalidTopic(InvalidInput):
    reason = "Invalid topic"


class InvalidWriter(InvalidInput):
    reason = "Invalid writer"


class InvalidLanguage(InvalidInput):
    reason = "Invalid language"


# -----------------------------
# Downstream failures (HTTP 500)
# -----------------------------
class UpstreamFailure(PrayerServiceError):
    """An external API, the bucket or the renderer failed"""


class GenerationError(UpstreamFailure):
    pass


class SynthesisError(UpstreamFailure):
    pass


class UploadError(UpstreamFailure):
    pass


class RenderError(UpstreamFailure):
    pass


class ListingError(UpstreamFailure):
    pass


class ObjectNotFound(PrayerServiceError):
    """Raised per listing entry when the paired text object is missing"""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Object not found: {key}")

from utility.catalog import LanguageCatalog, get_catalog
from utility.errors import InvalidTopic, InvalidWriter


def validate_prayer_request(topic: str, writer: str, language: str) -> LanguageCatalog:
    """
    Check topic/writer/language against the catalog.
    Raises InvalidLanguage, InvalidTopic or InvalidWriter; no side effects.
    Returns the catalog of the validated language.
    """
    catalog = get_catalog(language)

    if topic not in catalog.topics:
        raise InvalidTopic(topic)

    if writer not in catalog.writers:
        raise InvalidWriter(writer)

    return catalog

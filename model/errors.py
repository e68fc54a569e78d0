class SectionTableError(Exception):
    def __init__(self, value):
        super().__init__(value)
        self.value = value

    def __str__(self):
        return str(self.value)


class SpecLoadError(SectionTableError):
    """Specification or flag resource missing or malformed"""


class MalformedRecordError(SectionTableError):
    """Record layout or table buffer does not fit"""


class NotDecodedError(SectionTableError):
    """Query on a table that is not (successfully) decoded"""


class InvalidSectionNumber(SectionTableError, LookupError):
    pass


class SectionNotFound(SectionTableError, LookupError):
    pass


class FieldNotFoundError(SectionTableError, LookupError):
    pass

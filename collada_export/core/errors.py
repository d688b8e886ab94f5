"""Exception types raised by the exporter."""


class ExportError(Exception):
    """Base class for export failures that are reported to the caller."""


class InternalExportError(ExportError):
    """A broken invariant inside the encoder itself.

    Never caught by the exporter: it signals a bug in this package,
    not a problem with the input scene.
    """

"""Pick the response locale for the current Flask request."""

from __future__ import annotations

from flask import request

from .catalog import available_locales, normalise_locale


def request_locale(explicit: object = None) -> str:
    """Return the locale for the active request.

    Precedence: ``explicit`` (the JSON body's ``locale``), the ``?locale=``
    query argument, the best ``Accept-Language`` match, then English.
    """

    for candidate in (explicit, request.args.get("locale")):
        if isinstance(candidate, str) and candidate.strip():
            return normalise_locale(candidate)

    return normalise_locale(request.accept_languages.best_match(available_locales()))


__all__ = ["request_locale"]

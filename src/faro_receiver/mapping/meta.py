"""Prefixed record of a payload's shared Meta block.

Item records do not carry Meta fields on their own. Sinks that want the
session/app context next to each item merge this record onto it (see
`faro_receiver.mapper.flatten_payload(include_meta=True)`).

Layout, each block under its own prefix and empty strings skipped:
    sdk_name, sdk_version,
    app_name, app_release, app_version, app_environment,
    user_email, user_id, user_username, user_attr_*,
    session_id, session_attr_*,
    page_url,
    browser_name, browser_version, browser_os, browser_mobile,
    browser_userAgent, browser_language, browser_viewportWidth,
    browser_viewportHeight,
    view_name
"""
from __future__ import annotations

from ..models.payload import Browser, Meta
from ..ordered_map import OrderedMap

__all__ = ["flatten_meta"]


def _block(**fields: str) -> OrderedMap:
    kv = OrderedMap()
    for key, value in fields.items():
        if value:
            kv.set(key, value)
    return kv


def _browser(browser: Browser) -> OrderedMap:
    kv = _block(name=browser.name, version=browser.version, os=browser.os)
    kv.set("mobile", browser.mobile)
    kv.merge(
        _block(
            userAgent=browser.userAgent,
            language=browser.language,
            viewportWidth=browser.viewportWidth,
            viewportHeight=browser.viewportHeight,
        )
    )
    return kv


def flatten_meta(meta: Meta) -> OrderedMap:
    user = _block(email=meta.user.email, id=meta.user.id, username=meta.user.username)
    user.merge(OrderedMap.from_mapping(meta.user.attributes), prefix="attr_")
    session = _block(id=meta.session.id)
    session.merge(OrderedMap.from_mapping(meta.session.attributes), prefix="attr_")

    kv = OrderedMap()
    kv.merge(_block(name=meta.sdk.name, version=meta.sdk.version), prefix="sdk_")
    kv.merge(
        _block(
            name=meta.app.name,
            release=meta.app.release,
            version=meta.app.version,
            environment=meta.app.environment,
        ),
        prefix="app_",
    )
    kv.merge(user, prefix="user_")
    kv.merge(session, prefix="session_")
    kv.merge(_block(url=meta.page.url), prefix="page_")
    kv.merge(_browser(meta.browser), prefix="browser_")
    kv.merge(_block(name=meta.view.name), prefix="view_")
    return kv

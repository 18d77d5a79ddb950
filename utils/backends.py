from flask import current_app

EXTENSION_KEY = 'contesthub'


class Backends:
    """External collaborators built once per app in ``create_app``."""

    def __init__(self, store, identity, payments):
        self.store = store
        self.identity = identity
        self.payments = payments


def init_backends(app, backends):
    app.extensions[EXTENSION_KEY] = backends


def _backends():
    return current_app.extensions[EXTENSION_KEY]


def get_store():
    return _backends().store


def get_identity():
    return _backends().identity


def get_payments():
    return _backends().payments

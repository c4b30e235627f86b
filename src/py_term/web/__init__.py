"""Browser-facing JSON API for PyTerm.

This package provides a Flask application that exposes a terminal
session over HTTP.  It is an **optional** extra — install with::

    pip install py-term[web]

The ``create_app`` factory in ``app.py`` creates a session and serves
one endpoint per key event (submit, complete, history, interrupt) plus
a state endpoint for rendering.
"""

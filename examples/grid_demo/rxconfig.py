"""Reflex configuration for the editable grid demo app."""

import reflex as rx

config = rx.Config(
    app_name="grid_demo",
    plugins=[rx.plugins.SitemapPlugin()],
)

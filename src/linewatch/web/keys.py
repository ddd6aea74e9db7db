"""Typed application keys shared by the web handlers."""

from __future__ import annotations

from aiohttp import web

from linewatch.config import LinewatchConfig
from linewatch.dashboard.service import DashboardStateService
from linewatch.store.base import DocumentStore
from linewatch.view.debounce import Debouncer
from linewatch.view.model import DashboardViewModel

CONFIG_KEY = web.AppKey("config", LinewatchConfig)
STORE_KEY = web.AppKey("store", DocumentStore)
SERVICE_KEY = web.AppKey("service", DashboardStateService)
VIEW_KEY = web.AppKey("view", DashboardViewModel)
THRESHOLD_DEBOUNCER_KEY = web.AppKey("threshold_debouncer", Debouncer)
SOCKETS_KEY = web.AppKey("sockets", set)

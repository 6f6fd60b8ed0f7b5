"""Vercel serverless function for the liveness probe."""

from routing import HEALTH_PATH
from serverless import FunctionHandler


class handler(FunctionHandler):
    route = HEALTH_PATH

"""Vercel serverless function accepting form submissions."""

from routing import SUBMIT_PATH
from serverless import FunctionHandler


class handler(FunctionHandler):
    route = SUBMIT_PATH

"""Vercel serverless function listing stored submissions."""

from routing import SUBMISSIONS_PATH
from serverless import FunctionHandler


class handler(FunctionHandler):
    route = SUBMISSIONS_PATH

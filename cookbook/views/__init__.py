from .api_views import *

"""
Database models for ChurchOS
"""

from .models import *
from .seed import seed_demo_data

"""
MongoDB connection

Connection parameters come from the environment:
- DATABASE_URL: MongoDB connection string
- DATABASE_NAME: database holding the "customer" collection

When either is missing `db` stays None and the API reports the database
as not configured.
"""

import os

from pymongo import MongoClient

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")

client = None
db = None

if DATABASE_URL and DATABASE_NAME:
    client = MongoClient(DATABASE_URL, tz_aware=True)
    db = client[DATABASE_NAME]

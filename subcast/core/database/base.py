# File: subcast/core/database/base.py

from sqlalchemy.orm import declarative_base

# The shared registry. All feature models (MediaFile, Transcription, Segments) inherit from this.
Base = declarative_base()

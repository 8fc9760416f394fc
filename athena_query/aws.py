"""
boto3 client construction
"""

from typing import Optional

import boto3


def create_session(profile: Optional[str] = None, region: Optional[str] = None) -> boto3.Session:
    """
    Build a boto3 session

    With no profile, boto3's default chain applies (environment variables,
    ~/.aws/credentials, instance role).
    """
    return boto3.Session(profile_name=profile, region_name=region)


def create_client(service: str, profile: Optional[str] = None, region: Optional[str] = None):
    """Create a boto3 client for 'athena', 's3', ..."""
    return create_session(profile, region).client(service)

"""
Sample version records for local development.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from ..constants import CORE_IDENTIFIER
from ..models import Category, VersionRecord
from .client import DynamoDBClient
from .version_operations import put_version

SAMPLE_RECORDS = [
    VersionRecord(
        category=Category.CORE,
        identifier=CORE_IDENTIFIER,
        version="6.2.1",
        source_url="https://downloads.wordpress.org/release/wordpress-6.2.1.zip",
        attributes={
            "php_version": "5.6.20",
            "mysql_version": "5.0",
            "new_bundled": "6.1",
            "partial_version": False,
            "current": "6.2.1",
            "locale": "en_US",
        },
    ),
    VersionRecord(
        category=Category.CORE,
        identifier=CORE_IDENTIFIER,
        version="6.1.3",
        source_url="https://downloads.wordpress.org/release/wordpress-6.1.3.zip",
        attributes={
            "php_version": "5.6.20",
            "mysql_version": "5.0",
            "new_bundled": "6.0",
            "partial_version": False,
            "current": "6.1.3",
            "locale": "en_US",
        },
    ),
    VersionRecord(
        category=Category.PLUGIN,
        identifier="contact-form-7/wp-contact-form-7.php",
        version="5.7.2",
        source_url="https://downloads.wordpress.org/plugin/contact-form-7.5.7.2.zip",
        attributes={"slug": "contact-form-7", "url": "https://wordpress.org/plugins/contact-form-7/"},
    ),
    VersionRecord(
        category=Category.PLUGIN,
        identifier="akismet/akismet.php",
        version="5.1",
        source_url="https://downloads.wordpress.org/plugin/akismet.5.1.zip",
        attributes={"slug": "akismet", "url": "https://wordpress.org/plugins/akismet/"},
    ),
    VersionRecord(
        category=Category.THEME,
        identifier="twentytwentythree",
        version="1.1",
        source_url="https://downloads.wordpress.org/theme/twentytwentythree.1.1.zip",
        attributes={"url": "https://wordpress.org/themes/twentytwentythree/"},
    ),
    VersionRecord(
        category=Category.THEME,
        identifier="twentytwentytwo",
        version="1.4",
        source_url="https://downloads.wordpress.org/theme/twentytwentytwo.1.4.zip",
        attributes={"url": "https://wordpress.org/themes/twentytwentytwo/"},
    ),
]


def seed_versions(client: DynamoDBClient) -> int:
    """
    Store the sample records.

    Returns:
        Number of records written
    """
    for record in SAMPLE_RECORDS:
        put_version(client, record)
    return len(SAMPLE_RECORDS)

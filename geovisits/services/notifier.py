"""
Notification sinks

The core only ever calls ``notify(zone_name, event_kind, message=None)`` and
ignores the outcome; presenting the notification is someone else's job.
"""

import logging

import requests

logger = logging.getLogger(__name__)


def notification_title(zone_name, event_kind):
    return f'{event_kind.label}: {zone_name}'


class LogNotifier:
    """Writes notifications to the application log."""

    def notify(self, zone_name, event_kind, message=None):
        title = notification_title(zone_name, event_kind)
        if message:
            logger.info('%s - %s', title, message)
        else:
            logger.info('%s', title)


class WebhookNotifier:
    """POSTs notifications as JSON to a configured endpoint."""

    def __init__(self, url, timeout=5):
        self.url = url
        self.timeout = timeout

    def notify(self, zone_name, event_kind, message=None):
        payload = {
            'title': notification_title(zone_name, event_kind),
            'zone_name': zone_name,
            'event': event_kind.value,
            'message': message or '',
        }
        resp = requests.post(self.url, json=payload, timeout=self.timeout)
        resp.raise_for_status()

"""Amazon SNS notifier."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from sweeper.aws.client import create_boto_client
from sweeper.errors import ConfigurationError
from sweeper.notifications.base import NotificationType, Notifier

logger = logging.getLogger(__name__)


class SnsNotifier(Notifier):
    """Publishes notifications to an SNS topic.

    Recipients travel as a message attribute so topic subscribers (mailers,
    chat bridges) can route them.
    """

    SOURCE = "sweeper"

    def __init__(
        self,
        topic_arn: str,
        region: Optional[str] = None,
        aws_profile: Optional[str] = None,
        client: Any = None,
    ) -> None:
        parts = topic_arn.split(":")
        if len(parts) < 6 or parts[0] != "arn" or parts[2] != "sns" or not parts[3]:
            raise ConfigurationError(f"Invalid topic ARN: {topic_arn}")
        self.topic_arn = topic_arn
        self.region = region or parts[3]
        self.aws_profile = aws_profile
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = create_boto_client("sns", region_name=self.region, profile_name=self.aws_profile)
        return self._client

    def notify(self, recipients: List[str], context: Dict[str, Any], notification_type: str) -> None:
        message = {
            "notificationType": NotificationType(notification_type).value,
            "to": recipients,
            "severity": "HIGH",
            "source": self.SOURCE,
            "templateGroup": self.SOURCE,
            "additionalContext": context,
        }
        response = self.client.publish(
            TopicArn=self.topic_arn,
            Subject=f"{self.SOURCE}: resources scheduled for deletion",
            Message=json.dumps(message, default=str),
            MessageAttributes={
                "recipients": {"DataType": "String", "StringValue": ",".join(recipients)},
                "notificationType": {"DataType": "String", "StringValue": notification_type},
            },
        )
        logger.debug(f"Published notification {response.get('MessageId')} to {self.topic_arn}")

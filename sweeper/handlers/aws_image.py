"""AWS machine image (AMI) handler."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from botocore.exceptions import ClientError

from sweeper.aws.client import create_boto_client
from sweeper.engine.handler import ResourceHandler
from sweeper.models.marked_resource import MarkedResource
from sweeper.models.resource import Resource
from sweeper.models.work_configuration import WorkConfiguration
from sweeper.utils.timestamps import from_iso

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = ("InvalidAMIID.NotFound", "InvalidAMIID.Unavailable", "InvalidAMIID.Malformed")


class AwsImageHandler(ResourceHandler):
    """Handler for AMIs owned by the configured account.

    Attributes:
        aws_profile: AWS profile used for EC2 clients (optional)
        delete_snapshots: Also delete the EBS snapshots backing a deregistered image
    """

    RESOURCE_TYPE = "image"
    CLOUD_PROVIDER = "aws"

    def __init__(
        self,
        *args: Any,
        aws_profile: Optional[str] = None,
        delete_snapshots: bool = False,
        client_factory: Callable[..., Any] = create_boto_client,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.aws_profile = aws_profile
        self.delete_snapshots = delete_snapshots
        self.client_factory = client_factory

    def handles(self, resource_type: str, cloud_provider: str) -> bool:
        return resource_type == self.RESOURCE_TYPE and cloud_provider == self.CLOUD_PROVIDER

    def _client(self, work_configuration: WorkConfiguration) -> Any:
        return self.client_factory(
            service_name="ec2",
            region_name=work_configuration.region,
            profile_name=self.aws_profile,
        )

    def get_upstream_resources(self, work_configuration: WorkConfiguration) -> Optional[List[Resource]]:
        client = self._client(work_configuration)
        resources = []

        paginator = client.get_paginator("describe_images")
        for page in paginator.paginate(Owners=[work_configuration.account_id]):
            for image in page.get("Images", []):
                try:
                    resources.append(self._to_resource(image))
                except (KeyError, ValueError) as e:
                    logger.debug(f"Error processing image {image.get('ImageId', 'unknown')}: {e}")
                    continue

        logger.debug(f"Collected {len(resources)} images in {work_configuration.region}")
        return resources

    def get_upstream_resource(
        self, marked_resource: MarkedResource, work_configuration: WorkConfiguration
    ) -> Optional[Resource]:
        client = self._client(work_configuration)
        try:
            response = client.describe_images(ImageIds=[marked_resource.resource_id])
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in NOT_FOUND_CODES:
                return None
            raise

        images = response.get("Images", [])
        if not images or images[0].get("State") == "deregistered":
            return None
        return self._to_resource(images[0])

    def delete_resource(self, marked_resource: MarkedResource, work_configuration: WorkConfiguration) -> None:
        client = self._client(work_configuration)
        image_id = marked_resource.resource_id

        try:
            client.deregister_image(ImageId=image_id)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code not in NOT_FOUND_CODES:
                raise
            logger.info(f"Image {image_id} already deregistered")

        if self.delete_snapshots:
            for snapshot_id in marked_resource.resource.details.get("snapshot_ids", []):
                try:
                    client.delete_snapshot(SnapshotId=snapshot_id)
                except ClientError as e:
                    error_code = e.response.get("Error", {}).get("Code", "Unknown")
                    if error_code != "InvalidSnapshot.NotFound":
                        raise

    def _to_resource(self, image: Dict[str, Any]) -> Resource:
        tags = {tag["Key"]: tag["Value"] for tag in image.get("Tags", [])}
        snapshot_ids = [
            mapping["Ebs"]["SnapshotId"]
            for mapping in image.get("BlockDeviceMappings", [])
            if mapping.get("Ebs", {}).get("SnapshotId")
        ]

        return Resource(
            resource_id=image["ImageId"],
            resource_type=self.RESOURCE_TYPE,
            cloud_provider=self.CLOUD_PROVIDER,
            name=image.get("Name"),
            created_at=from_iso(image.get("CreationDate")),
            tags=tags,
            details={
                "state": image.get("State"),
                "owner_id": image.get("OwnerId"),
                "public": image.get("Public", False),
                "snapshot_ids": snapshot_ids,
            },
        )

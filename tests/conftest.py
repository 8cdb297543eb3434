import pytest

from tapp_operator.models import PodTemplateSpec


def pod_template_dict():
    return {
        "metadata": {
            "labels": {"test": "hello"},
            "annotations": {},
        },
        "spec": {
            "restartPolicy": "OnFailure",
            "dnsPolicy": "ClusterFirst",
            "containers": [
                {"name": "abc", "image": "image", "imagePullPolicy": "IfNotPresent"},
            ],
        },
    }


@pytest.fixture
def template_dict():
    return pod_template_dict()


@pytest.fixture
def template():
    return PodTemplateSpec.from_dict(pod_template_dict())

from unittest import mock

import boto3
import pytest
from moto import mock_aws

from clothcheck.dependencies import Dependencies
from clothcheck.weather import WeatherClient


REGION = 'ap-northeast-1'
POSTAL_CODE_TABLE = 'test-postal-codes'
TEMPERATURE_TABLE = 'test-temperatures'
BUCKET = 'test-bucket'


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Fake credentials so boto3 never reaches a real account."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', REGION)


def create_resources(dynamodb, s3_client):
    dynamodb.create_table(
        TableName=POSTAL_CODE_TABLE,
        KeySchema=[{'AttributeName': 'id', 'KeyType': 'HASH'}],
        AttributeDefinitions=[{'AttributeName': 'id', 'AttributeType': 'S'}],
        BillingMode='PAY_PER_REQUEST',
    )
    dynamodb.create_table(
        TableName=TEMPERATURE_TABLE,
        KeySchema=[
            {'AttributeName': 'id', 'KeyType': 'HASH'},
            {'AttributeName': 'temperature', 'KeyType': 'RANGE'},
        ],
        AttributeDefinitions=[
            {'AttributeName': 'id', 'AttributeType': 'S'},
            {'AttributeName': 'temperature', 'AttributeType': 'N'},
        ],
        BillingMode='PAY_PER_REQUEST',
    )
    s3_client.create_bucket(Bucket=BUCKET, CreateBucketConfiguration={'LocationConstraint': REGION})


@pytest.fixture
def aws():
    with mock_aws():
        dynamodb = boto3.resource('dynamodb', region_name=REGION)
        s3_client = boto3.client('s3', region_name=REGION)
        create_resources(dynamodb, s3_client)
        yield dynamodb, s3_client


@pytest.fixture
def postal_table(aws):
    return aws[0].Table(POSTAL_CODE_TABLE)


@pytest.fixture
def temperature_table(aws):
    return aws[0].Table(TEMPERATURE_TABLE)


@pytest.fixture
def s3_client(aws):
    return aws[1]


@pytest.fixture
def deps(postal_table, temperature_table, s3_client):
    weather = mock.Mock(spec=WeatherClient)
    weather.current_temperature.return_value = 5
    return Dependencies(
        messaging_api=mock.Mock(),
        blob_api=mock.Mock(),
        postal_code_table=postal_table,
        temperature_table=temperature_table,
        s3_client=s3_client,
        weather=weather,
        image_bucket=BUCKET,
    )


def replied_messages(deps, call_index=-1):
    """Messages passed to the LINE reply API in one call."""
    request = deps.messaging_api.reply_message.call_args_list[call_index].args[0]
    return request.messages

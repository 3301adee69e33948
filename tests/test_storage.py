from clothcheck.storage import (
    TemperatureRecord,
    generate_image_url,
    get_postal_code,
    get_temperature_record,
    image_extension,
    image_key,
    store_image_key,
    store_impression,
    store_postal_code,
    upload_image,
)

from conftest import BUCKET


def test_postal_code_round_trip(postal_table):
    assert get_postal_code(postal_table, 'U1') is None
    item = store_postal_code(postal_table, 'U1', '100-0004')
    assert item['postalCode'] == '100-0004'
    assert 'timestamp' in item
    assert get_postal_code(postal_table, 'U1') == '100-0004'


def test_postal_code_overwritten(postal_table):
    """Registering again keeps a single record holding the latest value."""
    store_postal_code(postal_table, 'U1', '100-0004')
    store_postal_code(postal_table, 'U1', '530-0001')
    items = postal_table.scan()['Items']
    assert len(items) == 1
    assert items[0]['postalCode'] == '530-0001'


def test_impression_round_trip(temperature_table):
    assert get_temperature_record(temperature_table, 'U1', 5) is None
    store_impression(temperature_table, 'U1', 5, 'あつい')
    record = get_temperature_record(temperature_table, 'U1', 5)
    assert record.result == 'あつい'
    assert record.image is None
    assert record.temperature == 5
    assert isinstance(record.temperature, int)


def test_impression_and_image_writers_share_record(temperature_table):
    store_image_key(temperature_table, 'U1', 5, '5U1.jpg')
    store_impression(temperature_table, 'U1', 5, 'さむい')
    store_impression(temperature_table, 'U1', 5, 'ちょうどいい')

    items = temperature_table.scan()['Items']
    assert len(items) == 1
    record = get_temperature_record(temperature_table, 'U1', 5)
    assert record.result == 'ちょうどいい'
    assert record.image == '5U1.jpg'


def test_records_are_per_temperature(temperature_table):
    store_impression(temperature_table, 'U1', 5, 'さむい')
    store_impression(temperature_table, 'U1', -2, 'さむい')
    store_impression(temperature_table, 'U2', 5, 'あつい')
    assert len(temperature_table.scan()['Items']) == 3
    assert get_temperature_record(temperature_table, 'U2', 5).result == 'あつい'


def test_temperature_record_from_item_blank_fields():
    record = TemperatureRecord.from_item({'id': 'U1', 'temperature': 7, 'result': ''})
    assert record.result is None
    assert record.image is None


def test_image_key_and_extension():
    assert image_key(5, 'user1') == '5user1.jpg'
    assert image_key(-1, 'U1', 'png') == '-1U1.png'
    assert image_extension('image/png') == 'png'
    assert image_extension('image/jpeg; charset=binary') == 'jpg'
    assert image_extension(None) == 'jpg'
    assert image_extension('application/octet-stream') == 'jpg'


def test_upload_and_sign_image(s3_client):
    upload_image(s3_client, BUCKET, '5U1.jpg', b'\xff\xd8photo')
    stored = s3_client.get_object(Bucket=BUCKET, Key='5U1.jpg')
    assert stored['Body'].read() == b'\xff\xd8photo'
    assert stored['ContentType'] == 'image/jpeg'

    url = generate_image_url(s3_client, BUCKET, '5U1.jpg', expires_in=60)
    assert url.startswith('https://')
    assert '5U1.jpg' in url

from voice_tagger.models import Attachment, MessageAction, UploadItem, UploadRecord


def test_upload_keeps_host_aliases_and_unknown_fields():
    upload = UploadRecord.model_validate(
        {"mimeType": "audio/mpeg", "file": "clip.mp3", "channelId": "42", "items": []}
    )

    upload.waveform = "AQI="
    host = upload.to_host()

    assert host["mimeType"] == "audio/mpeg"
    assert host["channelId"] == "42"
    assert host["waveform"] == "AQI="
    assert "durationSecs" not in host


def test_primary_item_prefers_first_item():
    item = UploadItem(mimeType="audio/wav", file=b"x")
    upload = UploadRecord(items=[item, UploadItem(mimeType="image/png")])

    assert upload.primary_item() is item
    assert UploadRecord(mimeType="audio/wav").primary_item().mime_type == "audio/wav"


def test_upload_item_asset_prefers_explicit_byte_source():
    item = UploadItem(mimeType="audio/ogg", file="clip.ogg", byteSource=b"raw", size=3)

    asset = item.to_asset()

    assert asset.byte_source == b"raw"
    assert asset.mime_type == "audio/ogg"
    assert asset.size_bytes == 3


def test_attachment_asset_falls_back_to_proxy_url():
    attachment = Attachment(content_type="audio/mpeg", proxy_url="https://media.example/a.mp3", size=1024)

    asset = attachment.to_asset()

    assert asset.byte_source == "https://media.example/a.mp3"
    assert asset.size_bytes == 1024


def test_message_action_parses_nested_records():
    action = MessageAction.model_validate(
        {"type": "MESSAGE_UPDATE", "message": {"id": "1", "flags": 4, "attachments": [{"content_type": "audio/wav"}]}}
    )

    assert action.message.flags == 4
    assert action.message.attachments[0].content_type == "audio/wav"

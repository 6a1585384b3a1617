import pytest

from washdesk_shared.supabase import storage
from washdesk_shared.supabase.storage import StorageError

RLS_ERROR = {"message": "new row violates row-level security policy", "statusCode": "403"}


@pytest.mark.parametrize(
    "message, status, bucket, expected",
    [
        ("new row violates row-level security policy", 403, "branches", True),
        ("Bucket not found", 404, "services", True),
        ("Bad request", 400, "branches", True),
        ("Payload too large", 413, "branches", False),
        ("Bucket not found", 404, "images", False),
    ],
)
def test_should_fallback(message, status, bucket, expected):
    assert storage.should_fallback(message, status, bucket, "images") is expected


def test_object_names_keep_the_extension():
    name = storage.build_object_name("Front.JPG")
    stamp, _, ext = name.partition("-")
    assert stamp.isdigit()
    assert name.endswith(".jpg")


def test_object_name_without_extension_is_rejected():
    with pytest.raises(Exception, match="extension"):
        storage.build_object_name("README")


def test_upload_falls_back_to_default_bucket(fake_supabase):
    fake_supabase.storage.bucket_errors["branches"] = RLS_ERROR

    url = storage.upload_image(b"img", "car.png", bucket="branches")

    assert "/public/images/" in url
    assert not url.endswith("?")
    assert len(fake_supabase.storage.objects["images"]) == 1
    assert "branches" not in fake_supabase.storage.objects


def test_upload_to_default_bucket_is_not_retried(fake_supabase):
    fake_supabase.storage.bucket_errors["images"] = RLS_ERROR

    with pytest.raises(StorageError) as excinfo:
        storage.upload_image(b"img", "car.png")

    assert excinfo.value.status == 403
    assert "images" not in fake_supabase.storage.objects


def test_unrelated_failure_is_not_retried(fake_supabase):
    fake_supabase.storage.bucket_errors["branches"] = {"message": "Payload too large",
                                                      "statusCode": "413"}
    with pytest.raises(StorageError, match="Payload too large"):
        storage.upload_image(b"img", "car.png", bucket="branches")
    assert "images" not in fake_supabase.storage.objects


def test_delete_uses_the_name_from_the_url(fake_supabase):
    fake_supabase.storage.objects["images"] = {"123-abc.png": b"img"}
    url = "https://fake.supabase.co/storage/v1/object/public/images/123-abc.png"
    assert storage.delete_image(url) is True
    assert fake_supabase.storage.objects["images"] == {}


def test_initialize_counts_existing_buckets_as_success(fake_supabase):
    fake_supabase.storage.buckets.add("images")
    result = storage.initialize_storage_buckets(fake_supabase, ["images", "branches"])
    assert result["success"] is True
    assert fake_supabase.storage.buckets == {"images", "branches"}


def test_initialize_reports_failed_buckets(fake_supabase):
    fake_supabase.storage.create_errors["services"] = "permission denied"
    result = storage.initialize_storage_buckets(fake_supabase, ["images", "services"])
    assert result["success"] is False
    assert result["message"] == "Failed to initialize buckets: services"


def test_check_storage_setup_lists_missing_buckets(fake_supabase):
    fake_supabase.storage.buckets.update({"images", "branches"})
    result = storage.check_storage_setup(fake_supabase)
    assert result["success"] is False
    assert result["missing"] == ["services"]

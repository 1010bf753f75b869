"""Zip archive handling for exported APIs and applications."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import zipfile
from pathlib import Path

import yaml

from apictl.models import (
    EXPORTED_APIS_DIR,
    LOGGER_NAME,
    META_FILE_API,
    META_FILE_APPLICATION,
    DeployConfig,
    ImportConfig,
    MetaData,
)

logger = logging.getLogger(LOGGER_NAME)


def replace_user_store_domain_delimiter(username: str) -> str:
    """Owners from a secondary user store look like 'DOMAIN/user'; '/' is not valid in a file name."""
    return username.replace("/", "#")


def api_archive_name(name: str, version: str) -> str:
    return f"{name}_{version}.zip"


def application_archive_name(name: str, owner: str) -> str:
    return f"{replace_user_store_domain_delimiter(owner)}_{name}.zip"


def create_dir_if_not_exist(path: str | os.PathLike) -> Path:
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_response_to_temp_zip(filename: str, content: bytes) -> Path:
    """Write raw response bytes to a zip in a fresh temp directory."""
    temp_dir = Path(tempfile.mkdtemp(prefix="apictl-"))
    temp_zip = temp_dir / filename
    temp_zip.write_bytes(content)
    return temp_zip


def _root_directory(names: list[str]) -> str:
    """The single top-level directory shared by every entry, or '' when there is none."""
    roots = {name.split("/", 1)[0] for name in names if name}
    if len(roots) != 1:
        return ""
    root = roots.pop()
    if all(name == root + "/" or name.startswith(root + "/") for name in names):
        return root
    return ""


def include_meta_file_to_zip(
    source_zip: str | os.PathLike, destination_zip: str | os.PathLike, meta_file_name: str, metadata: MetaData
) -> Path:
    """Copy source_zip to destination_zip, adding (or replacing) the YAML meta file."""
    destination_zip = Path(destination_zip)
    meta_yaml = yaml.safe_dump(metadata.to_dict(), default_flow_style=False, sort_keys=False)

    with zipfile.ZipFile(source_zip) as src:
        names = src.namelist()
        root = _root_directory(names)
        meta_path = f"{root}/{meta_file_name}" if root else meta_file_name
        with zipfile.ZipFile(destination_zip, "w", zipfile.ZIP_DEFLATED) as dst:
            for info in src.infolist():
                if info.filename == meta_path:
                    continue
                dst.writestr(info, src.read(info.filename))
            dst.writestr(meta_path, meta_yaml)

    logger.debug(f"Added {meta_path} to {destination_zip}")
    return destination_zip


def _write_with_meta(
    content: bytes, zip_filename: str, location: Path, meta_file_name: str, metadata: MetaData
) -> Path:
    temp_zip = write_response_to_temp_zip(zip_filename, content)
    try:
        create_dir_if_not_exist(location)
        return include_meta_file_to_zip(temp_zip, location / zip_filename, meta_file_name, metadata)
    finally:
        shutil.rmtree(temp_zip.parent, ignore_errors=True)


def write_api_to_zip(name: str, version: str, environment: str, content: bytes, export_dir: str | os.PathLike) -> Path:
    """Store an exported API as <export_dir>/apis/<environment>/<name>_<version>.zip."""
    metadata = MetaData(
        name=name,
        version=version,
        deploy=DeployConfig(import_config=ImportConfig(update=True, preserve_provider=True)),
    )
    location = Path(export_dir) / EXPORTED_APIS_DIR / environment
    return _write_with_meta(content, api_archive_name(name, version), location, META_FILE_API, metadata)


def write_application_to_zip(name: str, owner: str, location: str | os.PathLike, content: bytes) -> Path:
    """Store an exported application as <location>/<owner>_<name>.zip with application_meta.yaml inside."""
    metadata = MetaData(
        name=name,
        owner=owner,
        deploy=DeployConfig(
            import_config=ImportConfig(
                update=True,
                preserve_owner=True,
                skip_subscriptions=False,
                skip_keys=True,
            )
        ),
    )
    return _write_with_meta(
        content, application_archive_name(name, owner), Path(location), META_FILE_APPLICATION, metadata
    )


def read_meta_file(path: str | os.PathLike, meta_file_name: str) -> MetaData | None:
    """Load the meta file from a zip archive or an extracted directory, if present."""
    path = Path(path)
    if path.is_dir():
        candidates = [path / meta_file_name] + sorted(path.glob(f"*/{meta_file_name}"))
        for candidate in candidates:
            if candidate.is_file():
                return MetaData.from_dict(yaml.safe_load(candidate.read_text(encoding="utf-8")))
        return None

    with zipfile.ZipFile(path) as zf:
        names = zf.namelist()
        root = _root_directory(names)
        for candidate in (f"{root}/{meta_file_name}" if root else None, meta_file_name):
            if candidate and candidate in names:
                return MetaData.from_dict(yaml.safe_load(zf.read(candidate)))
    return None


def zip_directory(directory: str | os.PathLike) -> Path:
    """Zip an extracted export directory into a temp archive, keeping the directory as the top-level entry."""
    directory = Path(directory)
    temp_dir = Path(tempfile.mkdtemp(prefix="apictl-"))
    temp_zip = temp_dir / f"{directory.name}.zip"
    try:
        with zipfile.ZipFile(temp_zip, "w", zipfile.ZIP_DEFLATED) as zf:
            for file in sorted(directory.rglob("*")):
                if file.is_file():
                    zf.write(file, Path(directory.name) / file.relative_to(directory))
    except OSError:
        shutil.rmtree(temp_dir, ignore_errors=True)
        raise
    return temp_zip


def unzip(destination: str | os.PathLike, zip_path: str | os.PathLike) -> Path:
    destination = create_dir_if_not_exist(destination)
    with zipfile.ZipFile(zip_path) as zf:
        zf.extractall(destination)
    return destination

from .config import FixtureConfig, FixtureConfigError, load_fixture_config, load_settings
from .http_helper import UnexpectedStatusError
from .sharing import (
    ShareIdToken,
    share_resource,
    get_share_info_by_path,
    create_folder_in_last_public_share,
    create_file_in_last_public_share,
    to_form_url_encoded,
    get_share_id_token,
)
from .webdav import (
    FolderResult,
    PropertyNotFoundError,
    TrashBinItem,
    TrashbinDataError,
    create_dav_path,
    create_full_dav_url,
    create_folder_recursive,
    create_file,
    delete_item,
    get_file_id,
    list_versions_folder,
    get_sign_key,
    propfind,
    get_trash_bin_elements,
    mark_as_favorite,
    create_a_system_tag,
    assign_tag_to_file,
    get_tag_id,
)

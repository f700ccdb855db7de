from cc_switch.apps.common.repositories import JsonConfigRepository
from cc_switch.paths import AppPaths


class GeminiConfigRepository(JsonConfigRepository):
    @classmethod
    def from_paths(cls, paths: AppPaths) -> "GeminiConfigRepository":
        return cls(root=paths.config_dir, config_path=paths.settings_path)

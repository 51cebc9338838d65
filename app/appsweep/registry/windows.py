"""Windows registry implementation backed by winreg.

Only importable on Windows; callers check ``sys.platform`` first.
"""

import winreg

from appsweep.registry.base import Hive, Registry

_HIVE_HANDLES: dict[Hive, int] = {
    Hive.CURRENT_USER: winreg.HKEY_CURRENT_USER,
    Hive.USERS: winreg.HKEY_USERS,
    Hive.LOCAL_MACHINE: winreg.HKEY_LOCAL_MACHINE,
    Hive.CLASSES_ROOT: winreg.HKEY_CLASSES_ROOT,
    Hive.CURRENT_CONFIG: winreg.HKEY_CURRENT_CONFIG,
}


def _handle(hive: Hive) -> int:
    try:
        return _HIVE_HANDLES[hive]
    except KeyError:
        msg = f"Unsupported registry hive: {hive.display_name}"
        raise ValueError(msg) from None


class WindowsRegistry(Registry):
    """Registry access through the winreg module.

    Each call opens and closes its own key handles.
    """

    def key_exists(self, hive: Hive, key_path: str) -> bool:
        try:
            with winreg.OpenKey(_handle(hive), key_path, 0, winreg.KEY_READ):
                return True
        except FileNotFoundError:
            return False

    def delete_key_tree(self, hive: Hive, key_path: str) -> None:
        root = _handle(hive)
        # winreg.DeleteKey only removes leaf keys; clear children first
        with winreg.OpenKey(root, key_path, 0, winreg.KEY_READ | winreg.KEY_WRITE) as key:
            while True:
                try:
                    child = winreg.EnumKey(key, 0)
                except OSError:
                    break
                self.delete_key_tree(hive, f"{key_path}\\{child}")
        winreg.DeleteKey(root, key_path)

    def subkey_names(self, hive: Hive, key_path: str = "") -> list[str]:
        names: list[str] = []
        with winreg.OpenKey(_handle(hive), key_path, 0, winreg.KEY_READ) as key:
            index = 0
            while True:
                try:
                    names.append(winreg.EnumKey(key, index))
                except OSError:
                    break
                index += 1
        return names

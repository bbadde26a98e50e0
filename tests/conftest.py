"""Shared fixtures for flakenotes tests."""

import os

import pytest


SAMPLE_NOTIFICATION = """Flake lock file updates:

• Updated input 'home-manager':
    'github:nix-community/home-manager/bd92e8ee4a6031ca3dd836c91dc41c13fca1e533' (2025-10-03)
  → 'github:nix-community/home-manager/bcccb01d0a353c028cc8cb3254cac7ebae32929e' (2025-10-10)
• Updated input 'hypr-contrib':
    'github:hyprwm/contrib/513d71d3f42c05d6a38e215382c5a6ce971bd77d' (2025-09-30)
  → 'github:hyprwm/contrib/32e1a75b65553daefb419f0906ce19e04815aa3a' (2025-10-04)
• Updated input 'nihilistic-nvim':
    'github:iff/nihilistic-nvim/be0d9f0311c22ca7ef0d19431d3b2f537a95b764' (2025-10-06)
  → 'github:iff/nihilistic-nvim/9e091eb0f9ccee2ab2711b2226fec9c6af15fb6a' (2025-10-07)
• Added input 'ltstatus/flake-utils':
    'github:numtide/flake-utils/11707dc2f618dd54ca8739b309ec4fc024de578b' (2024-11-13)
• Updated input 'nixpkgs':
    'github:nixos/nixpkgs/dc704e6102e76aad573f63b74c742cd96f8f1e6c' (2025-10-02)
  → 'github:nixos/nixpkgs/2dad7af78a183b6c486702c18af8a9544f298377' (2025-10-09)
• Updated input 'osh-oxy':
    'github:iff/osh-oxy/e79f39e33912abd5b18ca7f5f1e0d0744d4a09e6' (2025-10-02)
  → 'github:iff/osh-oxy/eed066ec93dba6a85b709a31f482ebcdc376ce88' (2025-10-10)
• Added input 'nihilistic-nvim/rustacean-nvim/gen-luarc/flake-parts':
    follows 'nihilistic-nvim/rustacean-nvim/flake-parts'
"""

HOME_MANAGER_UPDATE = """Flake lock file updates:

• Updated input 'home-manager':
    'github:nix-community/home-manager/bd92e8ee4a6031ca3dd836c91dc41c13fca1e533' (2025-10-03)
  → 'github:nix-community/home-manager/bcccb01d0a353c028cc8cb3254cac7ebae32929e' (2025-10-10)
"""

CROSS_ORIGIN_UPDATE = """Flake lock file updates:

• Updated input 'nixpkgs':
    'github:nixos/nixpkgs/dc704e6102e76aad573f63b74c742cd96f8f1e6c' (2025-10-02)
  → 'gitlab:mirror/nixpkgs/2dad7af78a183b6c486702c18af8a9544f298377' (2025-10-09)
"""


@pytest.fixture
def sample_notification():
    """The notification printed by a typical `nix flake update`."""
    return SAMPLE_NOTIFICATION


@pytest.fixture
def home_manager_update():
    """A notification with a single same-repository update."""
    return HOME_MANAGER_UPDATE


@pytest.fixture
def cross_origin_update():
    """A notification whose only update moves to another host."""
    return CROSS_ORIGIN_UPDATE


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the user's ~/.flakenotes and FLAKENOTES_* variables."""
    monkeypatch.setenv('HOME', str(tmp_path))
    for name in list(os.environ):
        if name.startswith('FLAKENOTES_'):
            monkeypatch.delenv(name)

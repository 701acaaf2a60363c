"""
L0 Data — Platform install recipes.

One recipe per (tool, variant).  Pure data, no logic.

Each recipe is an ordered list of steps plus ``path_hints``: the
directories the installed tool typically lands in, which may not be
on the current process's PATH yet.  Placeholders expanded at dispatch:

    {version}   "3.11"
    {nodot}     "311"
    {user}      invoking (non-root) user name

Step ``condition`` values are evaluated by
``detection.condition.evaluate_condition``.
"""

from __future__ import annotations

from wxenv.core.models.host import ContainerBackend, PlatformVariant

_HOMEBREW_INSTALL = (
    'NONINTERACTIVE=1 /bin/bash -c "$(curl -fsSL '
    'https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"'
)

_DOCKER_APT_KEY = (
    "curl -fsSL https://download.docker.com/linux/ubuntu/gpg"
    " | gpg --dearmor --yes -o /etc/apt/keyrings/docker.gpg"
    " && chmod a+r /etc/apt/keyrings/docker.gpg"
)

_DOCKER_APT_REPO = (
    'echo "deb [arch=$(dpkg --print-architecture)'
    " signed-by=/etc/apt/keyrings/docker.gpg]"
    ' https://download.docker.com/linux/ubuntu $(lsb_release -cs) stable"'
    " > /etc/apt/sources.list.d/docker.list"
)

_COMPOSE_PLUGIN_LINK = (
    "mkdir -p ~/.docker/cli-plugins"
    ' && ln -sfn "$(brew --prefix)/opt/docker-compose/bin/docker-compose"'
    " ~/.docker/cli-plugins/docker-compose"
)

# Desktop products start their daemon asynchronously.
_WAIT_FOR_DAEMON = (
    "for i in $(seq 1 90); do docker info >/dev/null 2>&1 && exit 0; sleep 2; done;"
    " echo 'Docker daemon did not come up within 180s' >&2; exit 1"
)

_BREW_PATHS = ["/opt/homebrew/bin", "/usr/local/bin"]


PYTHON_RECIPES: dict[str, dict] = {

    PlatformVariant.UBUNTU: {
        "label": "apt + deadsnakes PPA",
        "steps": [
            {"label": "Update package lists",
             "command": ["apt-get", "update"], "needs_sudo": True},
            {"label": "Install software-properties-common",
             "command": ["apt-get", "install", "-y", "software-properties-common"],
             "needs_sudo": True},
            {"label": "Add deadsnakes PPA",
             "command": ["add-apt-repository", "-y", "ppa:deadsnakes/ppa"],
             "needs_sudo": True},
            {"label": "Update package lists (deadsnakes)",
             "command": ["apt-get", "update"], "needs_sudo": True},
            {"label": "Install Python {version}",
             "command": [
                 "apt-get", "install", "-y",
                 "python{version}", "python{version}-venv", "python{version}-dev",
             ],
             "needs_sudo": True},
        ],
        "path_hints": ["/usr/bin"],
    },

    PlatformVariant.MACOS: {
        "label": "Homebrew",
        "steps": [
            {"label": "Install Homebrew",
             "command": ["/bin/bash", "-c", _HOMEBREW_INSTALL],
             "condition": "missing:brew"},
            {"label": "Install Python {version}",
             "command": ["brew", "install", "python@{version}"]},
        ],
        "path_hints": _BREW_PATHS + [
            "/opt/homebrew/opt/python@{version}/bin",
            "/usr/local/opt/python@{version}/bin",
        ],
    },

    PlatformVariant.WINDOWS: {
        "label": "winget (silent)",
        "steps": [
            {"label": "Install Python {version}",
             "command": [
                 "winget", "install", "-e", "--id", "Python.Python.{version}",
                 "--silent", "--accept-package-agreements",
                 "--accept-source-agreements",
             ]},
        ],
        "path_hints": [
            "$LOCALAPPDATA/Programs/Python/Python{nodot}",
            "$LOCALAPPDATA/Programs/Python/Launcher",
            "C:/Windows",
        ],
    },
}


DOCKER_RECIPES: dict[tuple[str, str], dict] = {

    (PlatformVariant.UBUNTU, ContainerBackend.ENGINE): {
        "label": "Docker Engine + Compose v2 (apt)",
        "steps": [
            {"label": "Update package lists",
             "command": ["apt-get", "update"], "needs_sudo": True},
            {"label": "Install prerequisites",
             "command": [
                 "apt-get", "install", "-y",
                 "ca-certificates", "curl", "gnupg", "lsb-release",
             ],
             "needs_sudo": True},
            {"label": "Create keyring directory",
             "command": ["install", "-m", "0755", "-d", "/etc/apt/keyrings"],
             "needs_sudo": True},
            {"label": "Add Docker GPG key",
             "command": ["bash", "-c", _DOCKER_APT_KEY], "needs_sudo": True},
            {"label": "Add Docker apt repository",
             "command": ["bash", "-c", _DOCKER_APT_REPO], "needs_sudo": True},
            {"label": "Update package lists (docker)",
             "command": ["apt-get", "update"], "needs_sudo": True},
            {"label": "Install Docker Engine",
             "command": [
                 "apt-get", "install", "-y",
                 "docker-ce", "docker-ce-cli", "containerd.io",
                 "docker-buildx-plugin", "docker-compose-plugin",
             ],
             "needs_sudo": True},
            {"label": "Add {user} to the docker group",
             "command": ["usermod", "-aG", "docker", "{user}"],
             "needs_sudo": True, "condition": "not_root"},
            {"label": "Enable Docker on boot",
             "command": ["systemctl", "enable", "docker"],
             "needs_sudo": True, "condition": "has_systemd"},
            {"label": "Start Docker daemon",
             "command": ["systemctl", "start", "docker"],
             "needs_sudo": True, "condition": "has_systemd"},
        ],
        "path_hints": ["/usr/bin"],
    },

    (PlatformVariant.MACOS, ContainerBackend.COLIMA): {
        "label": "Colima + Docker CLI (Homebrew)",
        "steps": [
            {"label": "Install Homebrew",
             "command": ["/bin/bash", "-c", _HOMEBREW_INSTALL],
             "condition": "missing:brew"},
            {"label": "Install Colima and Docker CLI",
             "command": ["brew", "install", "colima", "docker", "docker-compose"]},
            {"label": "Link Compose v2 CLI plugin",
             "command": ["bash", "-c", _COMPOSE_PLUGIN_LINK]},
            {"label": "Start Colima (Apple Silicon)",
             "command": [
                 "colima", "start", "--cpu", "4", "--memory", "8", "--disk", "60",
                 "--vm-type=vz", "--vz-rosetta",
             ],
             "condition": "arm64+colima_stopped"},
            {"label": "Start Colima (Intel)",
             "command": ["colima", "start", "--cpu", "4", "--memory", "8", "--disk", "60"],
             "condition": "not_arm64+colima_stopped"},
        ],
        "path_hints": _BREW_PATHS,
    },

    (PlatformVariant.MACOS, ContainerBackend.RANCHER): {
        "label": "Rancher Desktop (Homebrew cask)",
        "steps": [
            {"label": "Install Homebrew",
             "command": ["/bin/bash", "-c", _HOMEBREW_INSTALL],
             "condition": "missing:brew"},
            {"label": "Install Rancher Desktop",
             "command": ["brew", "install", "--cask", "rancher"],
             "condition": "missing_app:Rancher Desktop"},
            {"label": "Start Rancher Desktop (moby, no Kubernetes)",
             "command": [
                 "~/.rd/bin/rdctl", "start",
                 "--container-engine.name=moby",
                 "--kubernetes.enabled=false",
             ]},
            {"label": "Wait for Docker daemon",
             "command": ["bash", "-c", _WAIT_FOR_DAEMON]},
        ],
        "path_hints": ["~/.rd/bin"] + _BREW_PATHS,
    },

    (PlatformVariant.MACOS, ContainerBackend.DESKTOP): {
        "label": "Docker Desktop (Homebrew cask)",
        "steps": [
            {"label": "Install Homebrew",
             "command": ["/bin/bash", "-c", _HOMEBREW_INSTALL],
             "condition": "missing:brew"},
            {"label": "Install Docker Desktop",
             "command": ["brew", "install", "--cask", "docker"],
             "condition": "missing_app:Docker"},
            {"label": "Launch Docker Desktop",
             "command": ["open", "-a", "Docker"]},
            {"label": "Wait for Docker daemon",
             "command": ["bash", "-c", _WAIT_FOR_DAEMON]},
        ],
        "path_hints": ["/Applications/Docker.app/Contents/Resources/bin"] + _BREW_PATHS,
    },

    (PlatformVariant.WINDOWS, ContainerBackend.DESKTOP): {
        "label": "Docker Desktop (winget)",
        "steps": [
            {"label": "Install Docker Desktop",
             "command": [
                 "winget", "install", "-e", "--id", "Docker.DockerDesktop",
                 "--silent", "--accept-package-agreements",
                 "--accept-source-agreements",
             ]},
        ],
        "path_hints": ["C:/Program Files/Docker/Docker/resources/bin"],
    },
}


DEFAULT_BACKENDS: dict[str, ContainerBackend] = {
    PlatformVariant.UBUNTU: ContainerBackend.ENGINE,
    PlatformVariant.MACOS: ContainerBackend.COLIMA,
    PlatformVariant.WINDOWS: ContainerBackend.DESKTOP,
}


def supported_backends(variant: PlatformVariant) -> list[ContainerBackend]:
    """Backends with a recipe on *variant*, default first."""
    backends = [b for (v, b) in DOCKER_RECIPES if v == variant]
    default = DEFAULT_BACKENDS.get(variant)
    if default in backends:
        backends.remove(default)
        backends.insert(0, default)
    return backends

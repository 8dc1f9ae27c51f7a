"""Fix suggestion templates.

Every string here is displayed to the user. None of it is ever executed.
"""

from devhelper.utils.platform import copy_command, venv_activate_command

FIXES = {
    # Node.js
    "install_node": "Install Node.js from https://nodejs.org",
    "install_npm": "npm comes with Node.js - reinstall Node.js",
    # Python
    "install_python": "Install Python from https://python.org",
    "pip_install": "pip install -r requirements.txt",
    "poetry_install": "poetry install",
    "pipenv_install": "pipenv install",
    # Java
    "install_java": "Install Java from https://adoptium.net",
    "install_maven": "Install Maven from https://maven.apache.org",
    "mvn_compile": "mvn compile",
    "gradle_build": "./gradlew build (or gradle build)",
    # Go
    "install_go": "Install Go from https://go.dev/dl/",
    "go_mod_tidy": "go mod tidy",
    "go_build": "go build ./...",
    # Rust
    "install_rust": "Install Rust from https://rustup.rs",
    "cargo_fetch": "cargo fetch",
    "cargo_build": "cargo build",
    # .NET
    "install_dotnet": "Install .NET SDK from https://dotnet.microsoft.com/download",
    "dotnet_restore": "dotnet restore",
    "dotnet_build": "dotnet build",
    # PHP
    "install_php": "Install PHP from https://php.net or use a package manager",
    "install_composer": "Install Composer from https://getcomposer.org",
    "composer_install": "composer install",
    # C/C++
    "install_cmake": "Install CMake from https://cmake.org",
    "cmake_configure": "mkdir build && cd build && cmake ..",
    # Docker
    "install_docker": "Install Docker from https://docker.com/get-started",
    "start_docker": "Start Docker Desktop or the Docker daemon",
    # Git
    "install_git": "Install Git from https://git-scm.com",
}

# Where to get the tools `setup` reports as missing, keyed by display name
TOOL_INSTALL_FIXES = {
    "Git": "Download from https://git-scm.com/downloads",
    "Node.js": "Download from https://nodejs.org/",
    "npm": "npm comes with Node.js - reinstall Node.js",
    "Python": "Download from https://python.org/downloads/",
    "Java": "Download from https://adoptium.net/",
    "Docker": "Download from https://docker.com/get-started",
}

# Plain-language "Why" lines for the setup summary, keyed by issue id
ISSUE_EXPLANATIONS = {
    "git-installed": "Git is required for version control and collaborating with others.",
    "git-user-name": "Git needs your name to label your commits.",
    "git-user-email": "Git needs your email for commit attribution.",
    "dependencies-installed": "The project needs its libraries/packages to run.",
    "dependencies-restored": "The project needs its libraries/packages to run.",
    "dependencies-fetched": "The project needs its libraries/packages to run.",
    "go-mod-tidy": "go.sum pins the checksums of the modules the project depends on.",
    "start-script": "There is no script defined to run this project.",
    "env-file": "The project may need configuration values (API keys, etc).",
    "venv-exists": "A virtual environment keeps this project's packages apart from other projects.",
    "venv-activated": "Packages install into the global Python until the environment is activated.",
    "project-built": "Build output is missing, so the project has not been compiled yet.",
}


def create_venv(python_command: str = "python") -> str:
    return f"{python_command} -m venv venv"


def activate_venv(venv_path: str = "venv") -> str:
    return venv_activate_command(venv_path)


def copy_env(source: str, dest: str = ".env") -> str:
    return copy_command(source, dest)


def tool_install_fix(display_name: str) -> str:
    return TOOL_INSTALL_FIXES.get(display_name, f"Install {display_name}")


def explain_issue(issue_id: str) -> str | None:
    if issue_id in ISSUE_EXPLANATIONS:
        return ISSUE_EXPLANATIONS[issue_id]
    if issue_id.endswith("-installed"):
        return "This tool is needed to build or run the project."
    return None

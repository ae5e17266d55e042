#!/usr/bin/env python3
import os
import re
import sys

PYPROJECT = 'pyproject.toml'
PACKAGE_INIT = 'v4signer/__init__.py'

PYPROJECT_VERSION = re.compile(r'^version = "([^"]+)"', re.MULTILINE)
INIT_VERSION = re.compile(r'__version__ = "[^"]+"')


def bump_version(current: str, bump_type: str) -> str:
    major, minor, patch = map(int, current.split('.'))
    if bump_type == 'major':
        return f"{major + 1}.0.0"
    elif bump_type == 'minor':
        return f"{major}.{minor + 1}.0"
    elif bump_type == 'patch':
        return f"{major}.{minor}.{patch + 1}"
    else:
        raise ValueError(f"Invalid bump type: {bump_type}")


def read_version(pyproject_path: str = PYPROJECT) -> str:
    with open(pyproject_path, 'r') as f:
        match = PYPROJECT_VERSION.search(f.read())
    if not match:
        raise ValueError(f"Could not find version in {pyproject_path}")
    return match.group(1)


def write_version(new_version: str, pyproject_path: str = PYPROJECT, init_path: str = PACKAGE_INIT) -> None:
    with open(pyproject_path, 'r') as f:
        content = f.read()
    with open(pyproject_path, 'w') as f:
        f.write(PYPROJECT_VERSION.sub(f'version = "{new_version}"', content, count=1))

    with open(init_path, 'r') as f:
        init_content = f.read()
    with open(init_path, 'w') as f:
        f.write(INIT_VERSION.sub(f'__version__ = "{new_version}"', init_content))


def main() -> None:
    if len(sys.argv) != 2:
        print("Usage: bump_version.py <major|minor|patch>", file=sys.stderr)
        sys.exit(1)

    try:
        current_version = read_version()
        new_version = bump_version(current_version, sys.argv[1])
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    write_version(new_version)

    # Output for GitHub Actions
    github_output = os.environ.get('GITHUB_OUTPUT')
    if github_output:
        with open(github_output, 'a') as f:
            f.write(f"current_version={current_version}\n")
            f.write(f"new_version={new_version}\n")
    else:
        print(f"Bumped version: {current_version} -> {new_version}")


if __name__ == '__main__':
    main()

import io
import json

import pytest

from jamtool.cargo import (
    Config,
    ConfigBuildpack,
    ConfigMetadata,
    ConfigMetadataDependency,
    ConfigOrder,
    ConfigOrderGroup,
    ConfigStack,
)
from jamtool.formatter import BuildpackMetadata, Formatter


def _dependencies(with_sources=True):
    first = ConfigMetadataDependency(
        id="some-dependency", stacks=["some-stack"], version="1.2.3", sha256="one-more-sha"
    )
    if with_sources:
        first.source = "some-source"
        first.source_sha256 = "source-sha"
    return [
        first,
        ConfigMetadataDependency(
            id="some-dependency", stacks=["other-stack"], version="1.2.3", sha256="other-sha"
        ),
        ConfigMetadataDependency(
            id="other-dependency",
            stacks=["some-stack", "other-stack"],
            version="2.3.4",
            sha256="another-sha",
        ),
        ConfigMetadataDependency(
            id="other-dependency",
            stacks=["other-stack"],
            version="2.3.5",
            checksum="sha512:some-sha",
        ),
    ]


DEFAULTS = {"some-dependency": "1.2.x", "other-dependency": "2.3.x"}

DEPENDENCY_LINES = [
    "#### Default Dependency Versions:",
    "| ID | Version |",
    "|---|---|",
    "| other-dependency | 2.3.x |",
    "| some-dependency | 1.2.x |",
    "",
    "#### Dependencies:",
    "| Name | Version | Stacks | Checksum |",
    "|---|---|---|---|",
    "| other-dependency | 2.3.5 | other-stack | sha512:some-sha |",
    "| other-dependency | 2.3.4 | other-stack some-stack | sha256:another-sha |",
    "| some-dependency | 1.2.3 | other-stack | sha256:other-sha |",
    "| some-dependency | 1.2.3 | some-stack | sha256:one-more-sha |",
]


def test_markdown_lists_dependencies():
    buffer = io.StringIO()
    Formatter(buffer).markdown([
        BuildpackMetadata(
            config=Config(
                buildpack=ConfigBuildpack(
                    id="some-buildpack", name="Some Buildpack", version="some-version"
                ),
                metadata=ConfigMetadata(
                    dependencies=_dependencies(), default_versions=dict(DEFAULTS)
                ),
                stacks=[ConfigStack(id="some-stack"), ConfigStack(id="other-stack")],
            ),
            sha256="sha256:some-buildpack-sha",
        )
    ])
    header = [
        "## Some Buildpack some-version",
        "",
        "**ID:** `some-buildpack`",
        "",
        "**Digest:** `sha256:some-buildpack-sha`",
        "",
        "#### Supported Stacks:",
        "- `other-stack`",
        "- `some-stack`",
        "",
    ]
    expected = "\n".join(header + DEPENDENCY_LINES) + "\n\n"
    assert buffer.getvalue() == expected


def test_markdown_without_dependencies_or_defaults():
    buffer = io.StringIO()
    Formatter(buffer).markdown([
        BuildpackMetadata(
            config=Config(
                buildpack=ConfigBuildpack(
                    id="some-buildpack", name="Some Buildpack", version="some-version"
                ),
                stacks=[ConfigStack(id="some-stack"), ConfigStack(id="other-stack")],
            ),
            sha256="sha256:some-buildpack-sha",
        )
    ])
    output = buffer.getvalue()
    assert output == (
        "## Some Buildpack some-version"
        "\n\n**ID:** `some-buildpack`\n\n"
        "**Digest:** `sha256:some-buildpack-sha`\n\n"
        "#### Supported Stacks:\n"
        "- `other-stack`\n"
        "- `some-stack`\n\n"
    )


def test_markdown_without_stacks():
    buffer = io.StringIO()
    Formatter(buffer).markdown([
        BuildpackMetadata(
            config=Config(
                buildpack=ConfigBuildpack(
                    id="some-buildpack", name="Some Buildpack", version="some-version"
                ),
                metadata=ConfigMetadata(
                    dependencies=_dependencies(with_sources=False),
                    default_versions=dict(DEFAULTS),
                ),
            ),
            sha256="sha256:some-buildpack-sha",
        )
    ])
    header = [
        "## Some Buildpack some-version",
        "",
        "**ID:** `some-buildpack`",
        "",
        "**Digest:** `sha256:some-buildpack-sha`",
        "",
    ]
    expected = "\n".join(header + DEPENDENCY_LINES) + "\n\n"
    assert buffer.getvalue() == expected


def test_markdown_prints_order_groupings():
    buffer = io.StringIO()
    Formatter(buffer).markdown([
        BuildpackMetadata(
            config=Config(
                buildpack=ConfigBuildpack(
                    id="order-buildpack", name="Order Buildpack", version="order-version"
                ),
                order=[
                    ConfigOrder(group=[
                        ConfigOrderGroup(id="some-buildpack", version="1.2.3"),
                        ConfigOrderGroup(
                            id="optional-buildpack", version="2.3.4", optional=True
                        ),
                    ]),
                    ConfigOrder(group=[
                        ConfigOrderGroup(id="some-buildpack", version="1.2.3"),
                        ConfigOrderGroup(id="other-buildpack", version="3.4.5"),
                    ]),
                ],
            ),
            sha256="sha256:order-buildpack-sha",
        ),
        BuildpackMetadata(config=Config(buildpack=ConfigBuildpack(
            id="some-buildpack", name="Some Buildpack", version="1.2.3"))),
        BuildpackMetadata(config=Config(buildpack=ConfigBuildpack(
            id="optional-buildpack", name="Optional Buildpack", version="2.3.4"))),
        BuildpackMetadata(config=Config(buildpack=ConfigBuildpack(
            id="other-buildpack", name="Other Buildpack", version="3.4.5"))),
    ])
    child = (
        "\n<details>\n<summary>{name} {version}</summary>\n"
        "\n**ID:** `{id}`\n\n---\n\n</details>\n"
    )
    expected = (
        "## Order Buildpack order-version"
        "\n\n**ID:** `order-buildpack`\n\n"
        "**Digest:** `sha256:order-buildpack-sha`\n\n"
        "#### Included Buildpackages:\n"
        "| Name | ID | Version |\n"
        "|---|---|---|\n"
        "| Some Buildpack | some-buildpack | 1.2.3 |\n"
        "| Optional Buildpack | optional-buildpack | 2.3.4 |\n"
        "| Other Buildpack | other-buildpack | 3.4.5 |\n"
        "\n<details>\n<summary>Order Groupings</summary>\n\n"
        "| ID | Version | Optional |\n"
        "|---|---|---|\n"
        "| some-buildpack | 1.2.3 | false |\n"
        "| optional-buildpack | 2.3.4 | true |\n\n"
        "| ID | Version | Optional |\n"
        "|---|---|---|\n"
        "| some-buildpack | 1.2.3 | false |\n"
        "| other-buildpack | 3.4.5 | false |\n\n"
        "</details>\n\n---\n"
        + child.format(name="Some Buildpack", version="1.2.3", id="some-buildpack")
        + child.format(name="Optional Buildpack", version="2.3.4", id="optional-buildpack")
        + child.format(name="Other Buildpack", version="3.4.5", id="other-buildpack")
    )
    output = buffer.getvalue()
    assert output == expected


def test_markdown_requires_entries():
    with pytest.raises(ValueError):
        Formatter(io.StringIO()).markdown([])


def _simple_dependencies():
    return [
        ConfigMetadataDependency(id="some-dependency", stacks=["some-stack"], version="1.2.3"),
        ConfigMetadataDependency(id="some-dependency", stacks=["other-stack"], version="1.2.3"),
        ConfigMetadataDependency(
            id="other-dependency", stacks=["some-stack", "other-stack"], version="2.3.4"
        ),
        ConfigMetadataDependency(id="other-dependency", stacks=["other-stack"], version="2.3.5"),
    ]


def test_json_single_buildpack():
    buffer = io.StringIO()
    Formatter(buffer).json([
        BuildpackMetadata(
            config=Config(
                buildpack=ConfigBuildpack(id="some-buildpack", version="some-version"),
                metadata=ConfigMetadata(
                    dependencies=_simple_dependencies(), default_versions=dict(DEFAULTS)
                ),
                stacks=[ConfigStack(id="some-stack"), ConfigStack(id="other-stack")],
            )
        )
    ])
    output = buffer.getvalue()
    assert json.loads(output) == {
        "buildpackage": {
            "buildpack": {"id": "some-buildpack", "version": "some-version"},
            "metadata": {
                "default-versions": {
                    "some-dependency": "1.2.x",
                    "other-dependency": "2.3.x",
                },
                "dependencies": [
                    {"id": "some-dependency", "stacks": ["some-stack"], "version": "1.2.3"},
                    {"id": "some-dependency", "stacks": ["other-stack"], "version": "1.2.3"},
                    {
                        "id": "other-dependency",
                        "stacks": ["some-stack", "other-stack"],
                        "version": "2.3.4",
                    },
                    {"id": "other-dependency", "stacks": ["other-stack"], "version": "2.3.5"},
                ],
            },
            "stacks": [{"id": "some-stack"}, {"id": "other-stack"}],
        }
    }
    assert output.endswith("\n")


def test_json_meta_buildpackage_with_children():
    buffer = io.StringIO()
    Formatter(buffer).json([
        BuildpackMetadata(
            config=Config(
                buildpack=ConfigBuildpack(id="some-buildpack", version="some-version"),
                metadata=ConfigMetadata(
                    dependencies=[
                        ConfigMetadataDependency(
                            id="some-dependency", stacks=["some-stack"], version="1.2.3"
                        )
                    ],
                    default_versions={"some-dependency": "1.2.x"},
                ),
                stacks=[ConfigStack(id="some-stack")],
            )
        ),
        BuildpackMetadata(
            config=Config(
                buildpack=ConfigBuildpack(id="some-buildpack", version="some-version"),
                order=[
                    ConfigOrder(group=[
                        ConfigOrderGroup(id="some-buildpack", version="1.2.3"),
                        ConfigOrderGroup(
                            id="optional-buildpack", version="2.3.4", optional=True
                        ),
                    ]),
                    ConfigOrder(group=[
                        ConfigOrderGroup(id="other-buildpack", version="3.4.5"),
                    ]),
                ],
            )
        ),
    ])
    output = buffer.getvalue()
    assert json.loads(output) == {
        "buildpackage": {
            "buildpack": {"id": "some-buildpack", "version": "some-version"},
            "metadata": {},
            "order": [
                {
                    "group": [
                        {"id": "some-buildpack", "version": "1.2.3"},
                        {"id": "optional-buildpack", "version": "2.3.4", "optional": True},
                    ]
                },
                {"group": [{"id": "other-buildpack", "version": "3.4.5"}]},
            ],
        },
        "children": [
            {
                "buildpack": {"id": "some-buildpack", "version": "some-version"},
                "metadata": {
                    "default-versions": {"some-dependency": "1.2.x"},
                    "dependencies": [
                        {"id": "some-dependency", "stacks": ["some-stack"], "version": "1.2.3"}
                    ],
                },
                "stacks": [{"id": "some-stack"}],
            }
        ],
    }


def test_json_escapes_html_characters():
    buffer = io.StringIO()
    Formatter(buffer).json([
        BuildpackMetadata(config=Config(buildpack=ConfigBuildpack(id="a<b>&c")))
    ])
    output = buffer.getvalue()
    assert "\\u003c" in output and "\\u003e" in output and "\\u0026" in output
    assert json.loads(output)["buildpackage"]["buildpack"]["id"] == "a<b>&c"


def test_json_requires_entries():
    with pytest.raises(ValueError):
        Formatter(io.StringIO()).json([])
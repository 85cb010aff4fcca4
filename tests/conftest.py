import pytest

SAMPLE_SIDECAR = '''-- we can read Lua syntax here!
return {
    ["annotations"] = {
        [1] = {
            ["chapter"] = "Chapter One",
            ["datetime"] = "2024-03-02 21:14:07",
            ["drawer"] = "lighten",
            ["pageno"] = 12,
            ["text"] = "It was a bright cold day in April.",
        },
        [2] = {
            ["datetime"] = "2024-03-03 08:05:59",
            ["pageno"] = 40,
        },
        [3] = {
            ["chapter"] = "Chapter Two",
            ["datetime"] = "not a date",
            ["note"] = "check this",
            ["text"] = "Who controls the past controls the future.",
        },
    },
    ["doc_pages"] = 320,
    ["doc_props"] = {
        ["authors"] = "George Orwell",
        ["language"] = "en",
        ["title"] = "Nineteen Eighty-Four",
    },
    ["stats"] = {
        ["highlights"] = 2,
        ["pages"] = 320,
        ["title"] = "Nineteen Eighty-Four",
    },
    ["summary"] = {
        ["modified"] = "2024-03-03",
        ["status"] = "reading",
    },
}
'''


@pytest.fixture
def sample_sidecar() -> str:
    return SAMPLE_SIDECAR

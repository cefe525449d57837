def assert_path_batch(paths, expected_count=4, steps_per_path=3):
    """Assert a batch of thinking paths has the expected shape."""
    assert len(paths) == expected_count, f"Expected {expected_count} paths, got {len(paths)}: {paths}"

    for path in paths:
        assert isinstance(path["name"], str) and path["name"], f"Path without a name: {path}"
        assert len(path["steps"]) == steps_per_path, f"Path '{path['name']}' has {len(path['steps'])} steps"
        assert all(isinstance(step, str) and step for step in path["steps"]), f"Empty step in '{path['name']}'"


def path_names(paths):
    return [path["name"] for path in paths]


def csv_section(prompt):
    """Return the CSV text embedded between the prompt's start and end markers."""
    start = prompt.index("---CSV START---\n") + len("---CSV START---\n")
    end = prompt.index("\n---CSV END---")
    return prompt[start:end]


def assert_in_order(text, *fragments):
    """Assert every fragment appears in text, in the given order."""
    position = -1
    for fragment in fragments:
        index = text.find(fragment, position + 1)
        assert index != -1, f"'{fragment}' not found after position {position} in:\n{text}"
        position = index

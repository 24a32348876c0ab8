import os


def relative_file_path(test_file, name):
    ''' Path of name relative to the directory holding test_file '''
    return os.path.join(os.path.dirname(test_file), name)


def fixture_path(name):
    return os.path.join(os.path.dirname(__file__), "fixtures", name)


def fixture_lines(name):
    with open(fixture_path(name)) as f:
        return f.read().splitlines()

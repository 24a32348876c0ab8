class FqFilterError(Exception):
    ''' Base class for every error the filter reports before giving up '''


class ConfigurationError(FqFilterError):
    pass


class ResourceError(FqFilterError):
    ''' An input or output could not be opened, closed, fetched or uploaded '''
    def __init__(self, path, cause=None, action="open"):
        self.path = path
        self.cause = cause
        self.action = action
        if cause is None:
            super().__init__("Failed to %s %s" % (action, path))
        else:
            super().__init__("Failed to %s %s: %s" % (action, path, cause))


class InvalidFileFormatError(FqFilterError):
    def __init__(self, line_num, line):
        self.line_num = line_num
        self.line = line
        super().__init__("Line %d should be a header line, got: %s" % (line_num, line))


class DesynchronizedInputError(FqFilterError):
    ''' A secondary input ran out of lines while the first input still had some '''
    def __init__(self, stream_index, line_num):
        self.stream_index = stream_index
        self.line_num = line_num
        super().__init__("Expecting input %d to have line %d; inputs are not record-aligned" % (stream_index, line_num))


class OutputWriteError(FqFilterError):
    def __init__(self, line_num, sink_index, cause=None):
        self.line_num = line_num
        self.sink_index = sink_index
        self.cause = cause
        super().__init__("Failed to write line %d to output %d: %s" % (line_num, sink_index, cause))

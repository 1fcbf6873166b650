"""
Custom exception hierarchy for the tempnet library.

This module defines the exceptions raised while loading temporal networks,
extracting two-paths, analysing betweenness preference and sampling null
models. Every exception carries a human-readable message plus optional
structured details and context, so callers can either print the error or
inspect it programmatically.

The hierarchy separates two kinds of failures that look alike at runtime:
- expected-degenerate input (e.g. a network without any two-path cannot be
  resampled), raised as ``EmptyPoolError``
- programmer errors (an internal invariant does not hold), raised as
  ``SamplingInvariantError``
"""

from typing import Dict, Any, Optional, List, Union
import traceback


class TempNetError(Exception):
    """
    Base exception for all tempnet errors.

    All other custom exceptions inherit from this class, allowing users to
    catch every library-specific error with a single except clause.

    Parameters
    ----------
    message : str
        Human-readable error message describing what went wrong
    details : Dict[str, Any], optional
        Additional structured information about the error
    cause : Exception, optional
        The underlying exception that caused this error
    context : Dict[str, Any], optional
        Additional context about the operation that failed

    Examples
    --------
    >>> raise TempNetError("Extraction failed")
    >>> raise TempNetError(
    ...     "Invalid network size",
    ...     details={"time_steps": 0, "edges": 10}
    ... )
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        self.message = message
        self.details = details or {}
        self.cause = cause
        self.context = context or {}

        full_message = message

        if self.details:
            detail_parts = []
            for key, value in self.details.items():
                if isinstance(value, (list, dict)) and len(str(value)) > 100:
                    # Truncate long collections
                    detail_parts.append(f"{key}=<{type(value).__name__} with {len(value)} items>")
                else:
                    detail_parts.append(f"{key}={value}")

            if detail_parts:
                full_message += f" (Details: {', '.join(detail_parts)})"

        if self.context:
            context_parts = [f"{k}={v}" for k, v in self.context.items()]
            if context_parts:
                full_message += f" (Context: {', '.join(context_parts)})"

        super().__init__(full_message)

        if cause is not None:
            self.__cause__ = cause

    def add_context(self, **kwargs: Any) -> 'TempNetError':
        """
        Add additional context to the exception.

        Parameters
        ----------
        **kwargs
            Key-value pairs to add to the context

        Returns
        -------
        TempNetError
            Self, for method chaining
        """
        self.context.update(kwargs)
        return self

    def get_debug_info(self) -> Dict[str, Any]:
        """
        Get comprehensive debugging information.

        Returns
        -------
        Dict[str, Any]
            Dictionary containing all available error information
        """
        return {
            "exception_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "traceback": traceback.format_exc() if hasattr(self, '__traceback__') else None
        }


class ValidationError(TempNetError):
    """
    Exception raised for input validation errors.

    Parameters
    ----------
    message : str
        Descriptive error message explaining the validation failure
    field : str, optional
        Name of the field or argument that failed validation
    value : Any, optional
        The invalid value that caused the error
    expected : str, optional
        Description of what was expected
    details : Dict[str, Any], optional
        Additional details about the validation failure

    Examples
    --------
    >>> raise ValidationError("Time step must be an integer", field="time", value="t1")
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        expected: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> None:
        self.field = field
        self.value = value
        self.expected = expected

        enhanced_details = details or {}
        if field is not None:
            enhanced_details["field"] = field
        if value is not None:
            enhanced_details["invalid_value"] = value
        if expected is not None:
            enhanced_details["expected"] = expected

        if field:
            enhanced_message = f"Validation error in field '{field}': {message}"
        else:
            enhanced_message = f"Validation error: {message}"

        super().__init__(enhanced_message, details=enhanced_details, **kwargs)


class GraphConstructionError(TempNetError):
    """
    Exception raised while building or manipulating weighted graphs.

    Parameters
    ----------
    message : str
        Description of the graph construction error
    graph_type : str, optional
        Type of graph being built (e.g. "first_order", "second_order")
    node_count : int, optional
        Number of vertices when the error occurred
    edge_count : int, optional
        Number of edges when the error occurred
    operation : str, optional
        Specific operation that failed (e.g. "reduce_to_largest_scc")
    """

    def __init__(
        self,
        message: str,
        graph_type: Optional[str] = None,
        node_count: Optional[int] = None,
        edge_count: Optional[int] = None,
        operation: Optional[str] = None,
        **kwargs
    ) -> None:
        self.graph_type = graph_type
        self.node_count = node_count
        self.edge_count = edge_count
        self.operation = operation

        context = {}
        if graph_type:
            context["graph_type"] = graph_type
        if node_count is not None:
            context["node_count"] = node_count
        if edge_count is not None:
            context["edge_count"] = edge_count
        if operation:
            context["operation"] = operation

        super().__init__(message, context=context, **kwargs)


class GraphNotIrreducibleError(ValidationError):
    """
    Exception raised when a graph is required to be strongly connected but is not.

    Random walks and other consumers of a transition matrix need an
    irreducible (strongly connected) graph. They call
    ``WeightedGraph.require_strongly_connected`` and receive this error
    instead of silently running on a reducible chain.

    Parameters
    ----------
    message : str
        Description of the failure
    vertex_count : int, optional
        Number of vertices in the graph
    largest_component_size : int, optional
        Size of the largest strongly connected component

    Examples
    --------
    >>> raise GraphNotIrreducibleError(
    ...     "Graph not irreducible",
    ...     vertex_count=10,
    ...     largest_component_size=7
    ... )
    """

    def __init__(
        self,
        message: str,
        vertex_count: Optional[int] = None,
        largest_component_size: Optional[int] = None,
        **kwargs
    ) -> None:
        self.vertex_count = vertex_count
        self.largest_component_size = largest_component_size

        details = kwargs.pop("details", None) or {}
        if vertex_count is not None:
            details["vertex_count"] = vertex_count
        if largest_component_size is not None:
            details["largest_component_size"] = largest_component_size

        super().__init__(message, field="graph", details=details, **kwargs)


class ConfigurationError(TempNetError):
    """
    Exception raised for invalid configuration or parameter values.

    Parameters
    ----------
    message : str
        Description of the configuration error
    parameter : str, optional
        Name of the problematic parameter
    value : Any, optional
        The invalid parameter value
    valid_options : List[Any], optional
        List of valid options for the parameter
    function : str, optional
        Name of the function where the error occurred

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "Invalid shuffling mode",
    ...     parameter="mode",
    ...     value="nodes",
    ...     valid_options=["twopaths", "edges"]
    ... )
    """

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        value: Optional[Any] = None,
        valid_options: Optional[List[Any]] = None,
        function: Optional[str] = None,
        **kwargs
    ) -> None:
        self.parameter = parameter
        self.value = value
        self.valid_options = valid_options
        self.function = function

        details = kwargs.get('details', {})
        if parameter:
            details["parameter"] = parameter
        if value is not None:
            details["invalid_value"] = value
        if valid_options:
            details["valid_options"] = valid_options
        if function:
            details["function"] = function

        enhanced_message = message
        if parameter and valid_options:
            enhanced_message += f". Valid options for '{parameter}': {valid_options}"

        kwargs["details"] = details
        super().__init__(enhanced_message, **kwargs)


class ComputationError(TempNetError):
    """
    Exception raised when computational operations fail.

    Parameters
    ----------
    message : str
        Description of the computational error
    operation : str, optional
        The computational operation that failed
    error_type : str, optional
        Type of computational error (e.g. "numerical", "sampling")
    resource_info : Dict[str, Any], optional
        Information about the computation when the error occurred
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_type: Optional[str] = None,
        resource_info: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> None:
        self.operation = operation
        self.error_type = error_type
        self.resource_info = resource_info or {}

        context = kwargs.get("context", {})
        if operation:
            context["operation"] = operation
        if error_type:
            context["error_type"] = error_type

        details = kwargs.get('details', {})
        details.update(self.resource_info)

        kwargs["details"] = details
        kwargs["context"] = context

        super().__init__(message, **kwargs)


class SamplingError(ComputationError):
    """
    Base exception for failures of the null-model sampler.

    Parameters
    ----------
    message : str
        Description of the sampling failure
    mode : str, optional
        Sampling mode that failed ("twopaths" or "edges")
    attempts : int, optional
        Number of draws attempted before giving up
    """

    def __init__(
        self,
        message: str,
        mode: Optional[str] = None,
        attempts: Optional[int] = None,
        **kwargs
    ) -> None:
        self.mode = mode
        self.attempts = attempts

        details = kwargs.get("details", {})
        if mode:
            details["mode"] = mode
        if attempts is not None:
            details["attempts"] = attempts
        kwargs["details"] = details
        kwargs.setdefault("error_type", "sampling")

        super().__init__(message, **kwargs)


class EmptyPoolError(SamplingError):
    """
    Exception raised when a sampling pool offers nothing to draw.

    This is the expected outcome for degenerate input, e.g. a temporal
    network without a single two-path, or an incoming half-edge for which no
    continuation could be found within the allowed number of attempts.
    """


class SamplingInvariantError(SamplingError):
    """
    Exception raised when an internal sampling invariant does not hold.

    This signals a programming error (e.g. a cumulative distribution that
    does not cover the drawn value), not bad input.
    """


class DataFormatError(ValidationError):
    """
    Exception raised for data format and file structure errors.

    Parameters
    ----------
    message : str
        Description of the format error
    format_type : str, optional
        Expected format (e.g. "edge sequence", "weighted edge list")
    file_path : str, optional
        Path to the problematic file
    line_number : int, optional
        Line number where the error occurred

    Examples
    --------
    >>> raise DataFormatError(
    ...     "Temporal network file not found",
    ...     format_type="edge sequence",
    ...     file_path="/data/network.tedges"
    ... )
    """

    def __init__(
        self,
        message: str,
        format_type: Optional[str] = None,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
        **kwargs
    ) -> None:
        details = kwargs.get('details', {})

        if format_type:
            details["format_type"] = format_type
        if file_path:
            details["file_path"] = file_path
        if line_number is not None:
            details["line_number"] = line_number

        kwargs["details"] = details
        super().__init__(message, **kwargs)


# Convenience functions for common error patterns

def validate_parameter(
    value: Any,
    valid_options: List[Any],
    parameter_name: str,
    function_name: Optional[str] = None
) -> None:
    """
    Validate that a parameter value is in the list of valid options.

    Parameters
    ----------
    value : Any
        The parameter value to validate
    valid_options : List[Any]
        List of valid options
    parameter_name : str
        Name of the parameter
    function_name : str, optional
        Name of the function being called

    Raises
    ------
    ConfigurationError
        If value is not in valid_options
    """
    if value not in valid_options:
        raise ConfigurationError(
            f"Invalid value for parameter '{parameter_name}': {value}",
            parameter=parameter_name,
            value=value,
            valid_options=valid_options,
            function=function_name
        )


def require_positive(
    value: Union[int, float],
    parameter_name: str,
    allow_zero: bool = False
) -> None:
    """
    Validate that a numeric parameter is positive.

    Parameters
    ----------
    value : Union[int, float]
        The numeric value to validate
    parameter_name : str
        Name of the parameter
    allow_zero : bool, default False
        Whether to allow zero values

    Raises
    ------
    ConfigurationError
        If value is not positive (or non-negative if allow_zero=True)
    """
    if allow_zero and value < 0:
        raise ConfigurationError(
            f"Parameter '{parameter_name}' must be non-negative, got {value}",
            parameter=parameter_name,
            value=value
        )
    elif not allow_zero and value <= 0:
        raise ConfigurationError(
            f"Parameter '{parameter_name}' must be positive, got {value}",
            parameter=parameter_name,
            value=value
        )

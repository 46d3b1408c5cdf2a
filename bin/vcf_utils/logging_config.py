#!/usr/bin/env python3
"""
Logging Configuration for the per-sample to INFO annotation

This module provides logging configuration and run metrics for the
annotation script. Standard output carries the annotated VCF, so every
handler configured here writes to standard error or to a log file.

Features:
- Configurable log level from the command line or environment
- Optional detailed log file
- Stage, metric and performance logging
- Resource usage snapshots (psutil)
"""

import json
import logging
import os
import sys
import time
from pathlib import Path
from typing import Dict, Optional, Union

import psutil

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_logging(log_level: str = "INFO", stream=None) -> None:
    """Configure root logging to standard error with the pipeline format."""
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)


class OperationalLogger:
    """
    Operational logger for the annotation run.

    Wraps a standard logger with stage, metric and performance records that
    are kept in memory and can be written out as a JSON report.
    """

    def __init__(self,
                 name: str = "vcfsample2info",
                 log_level: str = "INFO",
                 output_dir: Optional[Path] = None,
                 enable_metrics: bool = True):
        """
        Initialize operational logger.

        Args:
            name: Logger name
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
            output_dir: Directory for a detailed log file (None disables it)
            enable_metrics: Enable metrics collection
        """
        self.name = name
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)
        self.output_dir = Path(output_dir) if output_dir else None
        self.enable_metrics = enable_metrics
        self.logger = logging.getLogger(name)
        self.logger.setLevel(self.log_level)
        self.metrics = {'counters': {}, 'timers': {}, 'gauges': {}, 'stages': []}
        self.start_time = time.time()
        self.log_file = None

        if self.output_dir:
            self._setup_file_logging()

    def _setup_file_logging(self) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self.log_file = self.output_dir / f"{self.name}_{int(time.time())}.log"
            file_handler = logging.FileHandler(self.log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=DATE_FORMAT))
            self.logger.addHandler(file_handler)
            self.logger.info(f"Detailed logging to: {self.log_file}")
        except OSError as e:
            self.logger.warning(f"Could not set up file logging: {e}")

    def log_metric(self, metric_name: str, value: Union[int, float],
                   metric_type: str = "gauge", unit: str = "") -> None:
        """Record a metric and log it."""
        if not self.enable_metrics:
            return
        bucket = {'counter': 'counters', 'timer': 'timers'}.get(metric_type, 'gauges')
        self.metrics[bucket][metric_name] = {
            'value': value,
            'unit': unit,
            'timestamp': time.time(),
        }
        self.logger.info(f"METRIC: {metric_name}={value}{unit} [{metric_type}]")

    def log_stage(self, stage_name: str, status: str = "START") -> None:
        """Log a processing stage transition."""
        elapsed = time.time() - self.start_time
        if self.enable_metrics:
            self.metrics['stages'].append({'stage': stage_name, 'status': status, 'elapsed': elapsed})
        self.logger.info(f"STAGE: {stage_name} - {status} (elapsed: {elapsed:.2f}s)")

    def log_performance(self, operation: str, duration: float, items_processed: int = 0) -> None:
        """Log duration and throughput of an operation."""
        rate = items_processed / duration if duration > 0 and items_processed > 0 else 0
        self.logger.info(f"PERFORMANCE: {operation} - duration: {duration:.2f}s, "
                         f"items: {items_processed}, rate: {rate:.0f}/s")
        self.log_metric(f"{operation}_duration", round(duration, 3), "timer", "s")
        if items_processed > 0:
            self.log_metric(f"{operation}_items", items_processed, "counter")

    def log_resource_usage(self, context: str) -> Dict:
        """
        Log current memory and CPU usage of this process.

        Returns:
            Dictionary with resource usage data
        """
        resource_data = {'context': context, 'timestamp': time.time()}
        try:
            process = psutil.Process()
            memory_mb = process.memory_info().rss / 1024 / 1024
            cpu_percent = process.cpu_percent()
            resource_data['memory_mb'] = memory_mb
            resource_data['cpu_percent'] = cpu_percent
            self.logger.info(f"RESOURCES: {context} - memory: {memory_mb:.1f}MB, cpu: {cpu_percent:.1f}%")
            self.log_metric(f"memory_usage_mb_{context}", round(memory_mb, 1), "gauge", "MB")
        except psutil.Error as e:
            resource_data['error'] = str(e)
            self.logger.warning(f"RESOURCES: {context} - failed to get resource usage: {e}")
        return resource_data

    def get_metrics_summary(self) -> Dict:
        """Get metrics summary for reporting."""
        if not self.enable_metrics:
            return {'metrics_disabled': True}
        return {
            'name': self.name,
            'total_elapsed_seconds': time.time() - self.start_time,
            'log_level': logging.getLevelName(self.log_level),
            'metrics': self.metrics,
        }

    def save_metrics_report(self, output_file: Optional[Path] = None) -> Path:
        """
        Save metrics report to a JSON file.

        Args:
            output_file: Output file path (defaults to the log directory)

        Returns:
            Path to saved metrics file
        """
        if not output_file:
            base_dir = self.output_dir or Path.cwd()
            output_file = base_dir / f"{self.name}_metrics_{int(time.time())}.json"
        with open(output_file, 'w') as f:
            json.dump(self.get_metrics_summary(), f, indent=2, default=str)
        self.logger.info(f"Metrics report saved to: {output_file}")
        return Path(output_file)


def get_operational_logger(name: str = "vcfsample2info",
                           log_level: Optional[str] = None,
                           output_dir: Optional[Path] = None) -> OperationalLogger:
    """
    Get configured operational logger instance.

    Args:
        name: Logger name
        log_level: Log level (from environment or default to INFO)
        output_dir: Directory for a detailed log file (from environment if unset)

    Returns:
        Configured OperationalLogger instance
    """
    if not log_level:
        log_level = os.environ.get('VCFSAMPLE2INFO_LOG_LEVEL', 'INFO')

    if not output_dir:
        output_dir_str = os.environ.get('VCFSAMPLE2INFO_LOG_DIR')
        if output_dir_str:
            output_dir = Path(output_dir_str)

    enable_metrics = os.environ.get('VCFSAMPLE2INFO_ENABLE_METRICS', 'true').lower() == 'true'

    return OperationalLogger(
        name=name,
        log_level=log_level,
        output_dir=output_dir,
        enable_metrics=enable_metrics,
    )

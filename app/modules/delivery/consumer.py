"""Broker consumers for the delivery pipeline.

One ``DeliveryWorker`` consumes one channel queue with a bounded prefetch
window and manual acknowledgement. ``WorkerPool`` runs several workers per
channel in threads and owns the shutdown order: stop consuming, wait for
in-flight messages to be acked or rejected, cancel pending retry timers,
then close the broker connection.
"""

import signal
import threading
from typing import Any, Iterable, List, Optional

from kombu import Connection, Queue
from kombu.mixins import ConsumerMixin

from infrastructure.logging import clear_request_context, get_module_logger
from infrastructure.messaging import BrokerClient
from modules.delivery.processor import DeliveryOutcome, DeliveryProcessor
from modules.delivery.retry import RetryScheduler

logger = get_module_logger()


class DeliveryWorker(ConsumerMixin):
    """Consumes one queue and hands every message to the processor.

    ConsumerMixin works on its own clone of ``connection`` and reconnects
    indefinitely after the worker has started.

    Args:
        connection: Broker connection to clone for consuming
        queue: Channel queue to consume
        processor: Delivery processor
        prefetch_count: Unacknowledged messages allowed in flight
        name: Worker name used in logs and the thread name
    """

    def __init__(
        self,
        connection: Connection,
        queue: Queue,
        processor: DeliveryProcessor,
        prefetch_count: int = 10,
        name: Optional[str] = None,
    ):
        self.connection = connection
        self.queue = queue
        self.processor = processor
        self.prefetch_count = prefetch_count
        self.name = name or queue.name
        self.processed = 0

    def get_consumers(self, Consumer, channel):  # pylint: disable=invalid-name
        return [
            Consumer(
                queues=[self.queue],
                callbacks=[self.on_message],
                accept=["json"],
                prefetch_count=self.prefetch_count,
                on_decode_error=self.on_decode_error,
            )
        ]

    def on_message(self, body: Any, message) -> None:
        try:
            outcome = self.processor.process(body)
        except Exception as e:  # pylint: disable=broad-except
            logger.exception(
                "message_processing_error", worker=self.name, error=str(e)
            )
            message.reject(requeue=False)
            return
        finally:
            clear_request_context()
            self.processed += 1

        if outcome.should_ack:
            message.ack()
        else:
            message.reject(requeue=False)

        logger.debug("message_settled", worker=self.name, outcome=outcome.value)

    def on_decode_error(self, message, exc: Exception) -> None:
        logger.error(
            "message_decode_failed",
            worker=self.name,
            content_type=message.content_type,
            error=str(exc),
            outcome=DeliveryOutcome.MALFORMED.value,
        )
        message.reject(requeue=False)

    def on_connection_error(self, exc: Exception, interval: float) -> None:
        logger.warning(
            "consumer_connection_lost", worker=self.name, error=str(exc), retry_in=interval
        )

    def on_consume_ready(self, connection, channel, consumers, **kwargs) -> None:
        logger.info(
            "consumer_ready",
            worker=self.name,
            queue=self.queue.name,
            prefetch_count=self.prefetch_count,
        )


class WorkerPool:
    """Runs ``concurrency`` delivery workers per channel.

    Args:
        broker: Connected broker client
        processor: Delivery processor shared by all workers
        scheduler: Retry scheduler, shut down after the workers stop
        channels: Channel names to consume
        concurrency: Workers per channel
        prefetch_count: Prefetch window per worker
        shutdown_timeout: Seconds to wait for each worker thread on stop
    """

    def __init__(
        self,
        broker: BrokerClient,
        processor: DeliveryProcessor,
        scheduler: RetryScheduler,
        channels: Iterable[str],
        concurrency: int = 1,
        prefetch_count: int = 10,
        shutdown_timeout: float = 30.0,
    ):
        self._broker = broker
        self._processor = processor
        self._scheduler = scheduler
        self.channels = list(channels)
        self.concurrency = concurrency
        self.prefetch_count = prefetch_count
        self.shutdown_timeout = shutdown_timeout
        self.workers: List[DeliveryWorker] = []
        self._threads: List[threading.Thread] = []
        self._stop_event = threading.Event()
        self._stopped = False

    def start(self) -> None:
        """Start one thread per worker.

        Raises:
            KeyError: If a channel has no queue in the broker topology.
        """
        queues = {c: self._broker.topology.queue_for(c) for c in self.channels}
        for channel, queue in queues.items():
            for index in range(self.concurrency):
                worker = DeliveryWorker(
                    self._broker.connection,
                    queue,
                    self._processor,
                    prefetch_count=self.prefetch_count,
                    name=f"{channel}-{index}",
                )
                thread = threading.Thread(
                    target=worker.run,
                    name=f"delivery-worker-{worker.name}",
                    daemon=True,
                )
                self.workers.append(worker)
                self._threads.append(thread)
                thread.start()

        logger.info(
            "worker_pool_started",
            channels=self.channels,
            concurrency=self.concurrency,
            prefetch_count=self.prefetch_count,
        )

    def request_stop(self, *_args) -> None:
        """Signal handler: ask ``run_forever`` to shut down."""
        logger.info("worker_pool_stop_requested")
        self._stop_event.set()

    def stop(self) -> int:
        """Stop consuming, drain in-flight messages, then release resources.

        Returns:
            Number of pending retries lost at shutdown.
        """
        if self._stopped:
            return 0
        self._stopped = True

        for worker in self.workers:
            worker.should_stop = True

        for thread in self._threads:
            thread.join(timeout=self.shutdown_timeout)
            if thread.is_alive():
                logger.warning("worker_thread_still_running", thread=thread.name)

        lost = self._scheduler.shutdown()
        self._broker.close()
        logger.info(
            "worker_pool_stopped",
            processed=sum(w.processed for w in self.workers),
            retries_lost=lost,
        )
        return lost

    def run_forever(self) -> int:
        """Start, block until SIGINT/SIGTERM, then stop. Main thread only."""
        signal.signal(signal.SIGTERM, self.request_stop)
        signal.signal(signal.SIGINT, self.request_stop)
        self.start()
        self._stop_event.wait()
        return self.stop()

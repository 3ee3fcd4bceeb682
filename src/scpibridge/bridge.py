"""
The capability interface that a bridge server drives. One subclass of InstrumentBridge exists per
instrument family; the protocol layer only ever sees this abstraction.
"""
from abc import ABCMeta, abstractmethod
from enum import Enum


class BridgeError(Exception):
    """ Base class for errors raised by the bridge. """


class UnknownChannelError(BridgeError, KeyError):
    """ Raised when a channel name does not identify a channel on the instrument. """


class ChannelType(Enum):
    ANALOG = 'analog'
    DIGITAL = 'digital'
    EXTERNAL_TRIGGER = 'external_trigger'


class InstrumentBridge(metaclass=ABCMeta):
    """
    The set of operations an instrument must provide to be served over SCPI.
    Channel ids are opaque integers handed out by get_channel_id(). They must be unique across
    channel types and remain stable for as long as the instrument is served.
    """

    # -- Version information --

    @property
    @abstractmethod
    def make(self) -> str:
        """ the vendor / make of the instrument, reported by *IDN? """
        raise NotImplementedError

    @property
    @abstractmethod
    def model(self) -> str:
        """ the model name of the instrument, reported by *IDN? """
        raise NotImplementedError

    @property
    @abstractmethod
    def serial(self) -> str:
        """ the serial number of the instrument, reported by *IDN? """
        raise NotImplementedError

    @property
    @abstractmethod
    def firmware_version(self) -> str:
        """ the firmware version of the instrument, reported by *IDN? """
        raise NotImplementedError

    # -- Hardware capabilities --

    @abstractmethod
    def get_channel_count(self) -> int:
        """ the number of analog channels """
        raise NotImplementedError

    @abstractmethod
    def get_sample_rates(self) -> list:
        """ the sample rates, in Hz, that are valid for the current configuration """
        raise NotImplementedError

    @abstractmethod
    def get_sample_depths(self) -> list:
        """ the memory depths, in samples, that are valid for the current configuration """
        raise NotImplementedError

    # -- Acquisition --

    @abstractmethod
    def acquisition_start(self, one_shot=False):
        """ Arm the device for capture. When one_shot is True, only one waveform is captured. """
        raise NotImplementedError

    @abstractmethod
    def acquisition_force_trigger(self):
        """ Force the device to capture a waveform. """
        raise NotImplementedError

    @abstractmethod
    def acquisition_stop(self):
        """ Stop the device capturing further waveforms. """
        raise NotImplementedError

    @abstractmethod
    def is_trigger_armed(self) -> bool:
        raise NotImplementedError

    # -- Channel configuration --

    @abstractmethod
    def set_channel_enabled(self, channel: int, enabled: bool):
        raise NotImplementedError

    @abstractmethod
    def set_analog_coupling(self, channel: int, coupling: str):
        """
        :param coupling: the coupling name as sent by the client, e.g. "DC1M", "AC1M", "DC50".
            The instrument decides which names are legal.
        """
        raise NotImplementedError

    @abstractmethod
    def set_analog_range(self, channel: int, range_v: float):
        """ Set the voltage range (max-to-min) of an analog channel. """
        raise NotImplementedError

    @abstractmethod
    def set_analog_offset(self, channel: int, offset_v: float):
        raise NotImplementedError

    @abstractmethod
    def set_digital_threshold(self, channel: int, threshold_v: float):
        """ Set the voltage above which a digital channel reads high. """
        raise NotImplementedError

    @abstractmethod
    def set_digital_hysteresis(self, channel: int, hysteresis_v: float):
        raise NotImplementedError

    # -- Sampling configuration --

    @abstractmethod
    def set_sample_rate(self, rate_hz: int):
        raise NotImplementedError

    @abstractmethod
    def set_sample_depth(self, depth: int):
        raise NotImplementedError

    # -- Trigger configuration --

    @abstractmethod
    def set_trigger_delay(self, delay_fs: int):
        """ Set the trigger delay, in femtoseconds. """
        raise NotImplementedError

    @abstractmethod
    def set_trigger_source(self, channel: int):
        raise NotImplementedError

    @abstractmethod
    def set_trigger_level(self, level_v: float):
        raise NotImplementedError

    @abstractmethod
    def set_trigger_type_edge(self):
        """ Configure the device to use an edge trigger. """
        raise NotImplementedError

    @abstractmethod
    def set_edge_trigger_edge(self, edge: str):
        """
        :param edge: the edge that activates the trigger, as sent by the client ("RISING", "FALLING", ...)
        """
        raise NotImplementedError

    # -- Channel information --

    @abstractmethod
    def get_channel_id(self, name: str) -> int:
        """
        Converts a channel name (for example "C2") to the instrument's channel id.
        :raises UnknownChannelError: when the name does not identify a channel.
        """
        raise NotImplementedError

    @abstractmethod
    def get_channel_type(self, channel: int) -> ChannelType:
        """ Given a valid channel id, return its type. """
        raise NotImplementedError

    # -- Device specific extensions --

    def on_query(self, subject: str, verb: str):
        """
        Answers queries that the generic bridge doesn't know about.
        :return: the reply text, or None when the query isn't recognized.
        """
        return None

    def on_command(self, subject: str, verb: str, args: list) -> bool:
        """
        Handles commands that the generic bridge doesn't know about.
        :return: True if the command was recognized and carried out.
        """
        return False

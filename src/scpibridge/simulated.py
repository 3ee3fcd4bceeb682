"""
An in-memory instrument, for running the server without hardware and for testing.
"""
import logging

from scpibridge.bridge import ChannelType, InstrumentBridge, UnknownChannelError

logger = logging.getLogger(__name__)


class ChannelState:
    def __init__(self, name, channel_type: ChannelType):
        self.name = name
        self.channel_type = channel_type
        self.enabled = False
        self.coupling = 'DC1M'
        self.range_v = 1.0
        self.offset_v = 0.0
        self.threshold_v = 1.5
        self.hysteresis_v = 0.1


class SimulatedBridge(InstrumentBridge):
    """
    A simulated oscilloscope with analog channels C1..Cn, digital channels D0..Dn-1 and an external trigger
    input EX. Configuration is only recorded; no waveforms are produced.
    """

    sample_rates = (1000000, 10000000, 100000000, 1000000000)
    sample_depths = (1000, 10000, 100000, 1000000)

    def __init__(self, analog_channels=4, digital_channels=8, serial='SIM0001'):
        self._serial = serial
        self.analog_channel_count = analog_channels
        self.channels = []
        self.channels += [ChannelState('C%d' % (i + 1), ChannelType.ANALOG) for i in range(analog_channels)]
        self.channels += [ChannelState('D%d' % i, ChannelType.DIGITAL) for i in range(digital_channels)]
        self.channels.append(ChannelState('EX', ChannelType.EXTERNAL_TRIGGER))
        self._ids = {channel.name: index for index, channel in enumerate(self.channels)}

        self.sample_rate = self.sample_rates[-1]
        self.sample_depth = self.sample_depths[0]
        self.armed = False
        self.one_shot = False
        self.triggered = 0
        self.trigger_delay_fs = 0
        self.trigger_source = 0
        self.trigger_level_v = 0.0
        self.trigger_type = 'EDGE'
        self.trigger_edge = 'RISING'

    @property
    def make(self):
        return 'scpibridge'

    @property
    def model(self):
        return 'Simulated Scope'

    @property
    def serial(self):
        return self._serial

    @property
    def firmware_version(self):
        return '1.0'

    def get_channel_count(self):
        return self.analog_channel_count

    def get_sample_rates(self):
        return list(self.sample_rates)

    def get_sample_depths(self):
        return list(self.sample_depths)

    def acquisition_start(self, one_shot=False):
        self.armed = True
        self.one_shot = one_shot

    def acquisition_force_trigger(self):
        self.triggered += 1
        if self.one_shot:
            self.armed = False

    def acquisition_stop(self):
        self.armed = False

    def is_trigger_armed(self):
        return self.armed

    def set_channel_enabled(self, channel, enabled):
        self.channels[channel].enabled = enabled

    def set_analog_coupling(self, channel, coupling):
        if coupling not in ('DC1M', 'AC1M', 'DC50'):
            logger.warning("unsupported coupling %s for %s" % (coupling, self.channels[channel].name))
            return
        self.channels[channel].coupling = coupling

    def set_analog_range(self, channel, range_v):
        self.channels[channel].range_v = range_v

    def set_analog_offset(self, channel, offset_v):
        self.channels[channel].offset_v = offset_v

    def set_digital_threshold(self, channel, threshold_v):
        self.channels[channel].threshold_v = threshold_v

    def set_digital_hysteresis(self, channel, hysteresis_v):
        self.channels[channel].hysteresis_v = hysteresis_v

    def set_sample_rate(self, rate_hz):
        if rate_hz not in self.sample_rates:
            logger.warning("unsupported sample rate %d" % rate_hz)
            return
        self.sample_rate = rate_hz

    def set_sample_depth(self, depth):
        if depth not in self.sample_depths:
            logger.warning("unsupported sample depth %d" % depth)
            return
        self.sample_depth = depth

    def set_trigger_delay(self, delay_fs):
        self.trigger_delay_fs = delay_fs

    def set_trigger_source(self, channel):
        self.trigger_source = channel

    def set_trigger_level(self, level_v):
        self.trigger_level_v = level_v

    def set_trigger_type_edge(self):
        self.trigger_type = 'EDGE'

    def set_edge_trigger_edge(self, edge):
        if edge not in ('RISING', 'FALLING', 'ANY'):
            logger.warning("unsupported trigger edge %s" % edge)
            return
        self.trigger_edge = edge

    def get_channel_id(self, name):
        try:
            return self._ids[name]
        except KeyError:
            raise UnknownChannelError(name) from None

    def get_channel_type(self, channel):
        return self.channels[channel].channel_type

    def on_query(self, subject, verb):
        # the current rate and depth, in addition to the legal ones
        if verb == 'RATE':
            return str(self.sample_rate)
        if verb == 'DEPTH':
            return str(self.sample_depth)
        return None

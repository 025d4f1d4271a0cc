import struct

from sharkrom.errors import AssetDecodeError

N = 4096
F = 60
THRESHOLD = 2
NIL = N
M = 15
Q1 = 1 << M
Q2 = 2 * Q1
Q3 = 3 * Q1
Q4 = 4 * Q1
MAX_CUM = Q1 - 1
N_CHAR = 256 - THRESHOLD + F
RING_START = N - F


class _LzariModel:

    def __init__(self):
        self.char_to_sym = [0] * N_CHAR
        self.sym_to_char = [0] * (N_CHAR + 1)
        self.sym_freq = [0] * (N_CHAR + 1)
        self.sym_cum = [0] * (N_CHAR + 1)
        self.position_cum = [0] * (N + 1)
        self.low = 0
        self.high = Q4
        self.value = 0
        self.shifts = 0
        for sym in range(N_CHAR, 0, -1):
            ch = sym - 1
            self.char_to_sym[ch] = sym
            self.sym_to_char[sym] = ch
            self.sym_freq[sym] = 1
            self.sym_cum[sym - 1] = self.sym_cum[sym] + 1
        self.sym_freq[0] = 0
        for i in range(N, 0, -1):
            self.position_cum[i - 1] = self.position_cum[i] + 10000 // (i + 200)

    def update(self, sym: int):
        sym_freq = self.sym_freq
        sym_cum = self.sym_cum
        if sym_cum[0] >= MAX_CUM:
            c = 0
            for i in range(N_CHAR, 0, -1):
                sym_cum[i] = c
                sym_freq[i] = sym_freq[i] + 1 >> 1
                c += sym_freq[i]
            sym_cum[0] = c
        i = sym
        while sym_freq[i] == sym_freq[i - 1]:
            i -= 1
        if i < sym:
            ch_i = self.sym_to_char[i]
            ch_sym = self.sym_to_char[sym]
            self.sym_to_char[i] = ch_sym
            self.sym_to_char[sym] = ch_i
            self.char_to_sym[ch_i] = sym
            self.char_to_sym[ch_sym] = i
        sym_freq[i] += 1
        for k in range(i):
            sym_cum[k] += 1


class _BitReader:

    def __init__(self, data: bytes, pos: int):
        self.data = data
        self.pos = pos
        self.mask = 0
        self.buffer = 0

    def get_bit(self) -> int:
        self.mask >>= 1
        if self.mask == 0:
            # reading past the end yields zero bits
            self.buffer = self.data[self.pos] if self.pos < len(self.data) else 0
            self.pos += 1
            self.mask = 128
        return 1 if self.buffer & self.mask else 0


class _BitWriter:

    def __init__(self, out: bytearray):
        self.out = out
        self.buffer = 0
        self.mask = 128

    def put_bit(self, bit: int):
        if bit:
            self.buffer |= self.mask
        self.mask >>= 1
        if self.mask == 0:
            self.out.append(self.buffer)
            self.buffer = 0
            self.mask = 128


class _Decoder:

    def __init__(self, data: bytes):
        self.model = _LzariModel()
        self.bits = _BitReader(data, 4)
        for _ in range(M + 2):
            self.model.value = 2 * self.model.value + self.bits.get_bit()

    def _binary_search_sym(self, x: int) -> int:
        sym_cum = self.model.sym_cum
        i, j = 1, N_CHAR
        while i < j:
            k = (i + j) // 2
            if x < sym_cum[k]:
                i = k + 1
            else:
                j = k
        return i

    def _binary_search_pos(self, x: int) -> int:
        position_cum = self.model.position_cum
        i, j = 1, N
        while i < j:
            k = (i + j) // 2
            if x < position_cum[k]:
                i = k + 1
            else:
                j = k
        return i - 1

    def _renormalize(self):
        m = self.model
        while True:
            if m.low >= Q2:
                m.value -= Q2
                m.low -= Q2
                m.high -= Q2
            elif m.low >= Q1 and m.high <= Q3:
                m.value -= Q1
                m.low -= Q1
                m.high -= Q1
            elif m.high > Q2:
                break
            m.low += m.low
            m.high += m.high
            m.value = 2 * m.value + self.bits.get_bit()

    def decode_char(self) -> int:
        m = self.model
        span = m.high - m.low
        sym = self._binary_search_sym(((m.value - m.low + 1) * m.sym_cum[0] - 1) // span)
        m.high = m.low + span * m.sym_cum[sym - 1] // m.sym_cum[0]
        m.low += span * m.sym_cum[sym] // m.sym_cum[0]
        self._renormalize()
        ch = m.sym_to_char[sym]
        m.update(sym)
        return ch

    def decode_position(self) -> int:
        m = self.model
        span = m.high - m.low
        position = self._binary_search_pos(((m.value - m.low + 1) * m.position_cum[0] - 1) // span)
        m.high = m.low + span * m.position_cum[position] // m.position_cum[0]
        m.low += span * m.position_cum[position + 1] // m.position_cum[0]
        self._renormalize()
        return position


def decompress_lzari(data: bytes) -> bytes:
    if len(data) < 4:
        raise AssetDecodeError(f'LZARI stream too short: {len(data)} bytes')
    size = struct.unpack_from('<I', data, 0)[0]
    out = bytearray()
    if size == 0:
        return bytes(out)
    decoder = _Decoder(bytes(data))
    text_buf = bytearray(b' ' * RING_START + b'\x00' * (N - RING_START))
    r = RING_START
    while len(out) < size:
        c = decoder.decode_char()
        if c < 256:
            out.append(c)
            text_buf[r] = c
            r = r + 1 & N - 1
        else:
            i = r - decoder.decode_position() - 1 & N - 1
            for k in range(c - 253):
                if len(out) >= size:
                    break
                c = text_buf[i + k & N - 1]
                out.append(c)
                text_buf[r] = c
                r = r + 1 & N - 1
    return bytes(out)


class _Encoder:

    def __init__(self, data: bytes):
        self.data = data
        self.model = _LzariModel()
        self.out = bytearray(struct.pack('<I', len(data)))
        self.bits = _BitWriter(self.out)
        self.text_buf = bytearray(N + F - 1)
        self.lson = [NIL] * (N + 1)
        self.rson = [NIL] * (N + 257)
        self.dad = [NIL] * (N + 1)
        self.match_length = 0
        self.match_position = 0

    def _insert_node(self, r: int):
        text_buf = self.text_buf
        lson, rson, dad = self.lson, self.rson, self.dad
        cmp = 1
        p = N + 1 + text_buf[r]
        lson[r] = NIL
        rson[r] = NIL
        self.match_length = 0
        while True:
            if cmp >= 0:
                if rson[p] != NIL:
                    p = rson[p]
                else:
                    rson[p] = r
                    dad[r] = p
                    return
            elif lson[p] != NIL:
                p = lson[p]
            else:
                lson[p] = r
                dad[r] = p
                return
            i = 1
            while i < F:
                cmp = text_buf[r + i] - text_buf[p + i]
                if cmp != 0:
                    break
                i += 1
            if i > THRESHOLD:
                if i > self.match_length:
                    self.match_position = r - p & N - 1
                    self.match_length = i
                    if i >= F:
                        break
                elif i == self.match_length:
                    temp = r - p & N - 1
                    if temp < self.match_position:
                        self.match_position = temp
        dad[r] = dad[p]
        lson[r] = lson[p]
        rson[r] = rson[p]
        dad[lson[p]] = r
        dad[rson[p]] = r
        if rson[dad[p]] == p:
            rson[dad[p]] = r
        else:
            lson[dad[p]] = r
        dad[p] = NIL

    def _delete_node(self, p: int):
        lson, rson, dad = self.lson, self.rson, self.dad
        if dad[p] == NIL:
            return
        if rson[p] == NIL:
            q = lson[p]
        elif lson[p] == NIL:
            q = rson[p]
        else:
            q = lson[p]
            if rson[q] != NIL:
                while rson[q] != NIL:
                    q = rson[q]
                rson[dad[q]] = lson[q]
                dad[lson[q]] = dad[q]
                lson[q] = lson[p]
                dad[lson[p]] = q
            rson[q] = rson[p]
            dad[rson[p]] = q
        dad[q] = dad[p]
        if rson[dad[p]] == p:
            rson[dad[p]] = q
        else:
            lson[dad[p]] = q
        dad[p] = NIL

    def _output(self, bit: int):
        self.bits.put_bit(bit)
        while self.model.shifts > 0:
            self.bits.put_bit(0 if bit else 1)
            self.model.shifts -= 1

    def _renormalize(self):
        m = self.model
        while True:
            if m.high <= Q2:
                self._output(0)
            elif m.low >= Q2:
                self._output(1)
                m.low -= Q2
                m.high -= Q2
            elif m.low >= Q1 and m.high <= Q3:
                m.shifts += 1
                m.low -= Q1
                m.high -= Q1
            else:
                break
            m.low += m.low
            m.high += m.high

    def encode_char(self, ch: int):
        m = self.model
        sym = m.char_to_sym[ch]
        span = m.high - m.low
        m.high = m.low + span * m.sym_cum[sym - 1] // m.sym_cum[0]
        m.low += span * m.sym_cum[sym] // m.sym_cum[0]
        self._renormalize()
        m.update(sym)

    def encode_position(self, position: int):
        m = self.model
        span = m.high - m.low
        m.high = m.low + span * m.position_cum[position] // m.position_cum[0]
        m.low += span * m.position_cum[position + 1] // m.position_cum[0]
        self._renormalize()

    def encode_end(self):
        self.model.shifts += 1
        self._output(0 if self.model.low < Q1 else 1)
        for _ in range(7):
            self.bits.put_bit(0)

    def encode(self) -> bytes:
        data = self.data
        size = len(data)
        if size == 0:
            return bytes(self.out)
        text_buf = self.text_buf
        s = 0
        r = RING_START
        for i in range(s, r):
            text_buf[i] = 32
        cursor = 0
        length = 0
        while length < F and cursor < size:
            text_buf[r + length] = data[cursor]
            cursor += 1
            length += 1
        for i in range(1, F + 1):
            self._insert_node(r - i)
        self._insert_node(r)
        while length > 0:
            if self.match_length > length:
                self.match_length = length
            if self.match_length <= THRESHOLD:
                self.match_length = 1
                self.encode_char(text_buf[r])
            else:
                self.encode_char(255 - THRESHOLD + self.match_length)
                self.encode_position(self.match_position - 1)
            last_match_length = self.match_length
            i = 0
            while i < last_match_length and cursor < size:
                c = data[cursor]
                cursor += 1
                self._delete_node(s)
                text_buf[s] = c
                if s < F - 1:
                    text_buf[s + N] = c
                s = s + 1 & N - 1
                r = r + 1 & N - 1
                self._insert_node(r)
                i += 1
            while i < last_match_length:
                i += 1
                self._delete_node(s)
                s = s + 1 & N - 1
                r = r + 1 & N - 1
                length -= 1
                if length != 0:
                    self._insert_node(r)
        self.encode_end()
        return bytes(self.out)


def compress_lzari(data: bytes) -> bytes:
    return _Encoder(bytes(data)).encode()

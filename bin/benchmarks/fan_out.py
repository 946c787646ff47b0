import threading
import time

from chanpipe.pipelines import fan_in, fan_out, stream_slice

NX = 100


def inc(x):
    time.sleep(1)
    return x + 1


def plain():
    result = []
    t0 = time.perf_counter()
    for x in range(NX):
        result.append(inc(x))
    t1 = time.perf_counter()

    print('time elapsed:', t1 - t0)
    print(sorted(result))


def streamed(workers):
    token = threading.Event()
    t0 = time.perf_counter()
    source = stream_slice(token, range(NX))
    s = fan_in(token, *fan_out(token, source, inc, workers))

    result = s.collect()
    t1 = time.perf_counter()

    print('time elapsed:', t1 - t0)
    print(sorted(result))


print('streamed')
streamed(workers=100)
# Close to the perfect value 1.0 second.

print('')
print('10-streamed')
streamed(workers=10)
# Close to the perfect value 10.0 seconds.

print('')
print('unistreamed')
streamed(workers=1)
# Close to the perfect value 100.0 seconds.

print('')
print('plain')
plain()

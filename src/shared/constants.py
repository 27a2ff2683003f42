# Метров в одном градусе (плоское приближение, достаточно для масштаба города)
METERS_PER_DEGREE = 111_000.0

# Допуск совпадения заявленного центра области с серединой её прямоугольника (градусы)
CENTER_TOLERANCE_DEG = 1e-7

# Порог относительного искажения плоской проекции, выше которого пишем предупреждение
PLANAR_DISTORTION_WARN_RATIO = 0.05

# Допустимое смещение центра геометрии от центра области (доля от размера области)
ALIGNMENT_OFFSET_TOLERANCE = 0.1

# --- Трассировка линий тока

# Шаг трассировки (единицы локальной системы координат)
STREAMLINE_STEP_SIZE = 12.0

# Максимальное количество точек одной линии тока
STREAMLINE_MAX_STEPS = 200

# Припуск к границам области, после которого трассировка прекращается
STREAMLINE_BOUNDS_MARGIN = 50.0

# Минимальное количество точек, при котором линия тока сохраняется
STREAMLINE_MIN_POINTS = 15

# Диапазон высот для вертикального дрожания линии
STREAMLINE_Y_MIN = 10.0
STREAMLINE_Y_MAX = 120.0

# Амплитуда вертикального дрожания (полный размах)
JITTER_AMPLITUDE = 1.5

# Базовое зерно генератора дрожания
JITTER_SEED = 0

# Рёбра короче этого значения считаются вырожденными
MIN_EDGE_LENGTH = 1e-3

# Минимальное число различных вершин контура здания
MIN_FOOTPRINT_POINTS = 3

# --- Сетка затравочных точек

# Разрешение сетки затравок по каждой оси
SEED_GRID_RESOLUTION = 10

# Количество слоёв по высоте
SEED_HEIGHT_LAYERS = 3

# Высота нижнего слоя и шаг между слоями (20, 55, 90)
SEED_LAYER_BASE = 20.0
SEED_LAYER_SPACING = 35.0

# Максимальное число потоков для трассировки
STREAMLINE_PARALLEL_WORKERS = 8

# --- Интерполяция (IDW)

# Показатель степени весов
IDW_POWER = 2.0

# Расстояние, ближе которого возвращается значение станции без усреднения
IDW_EPSILON = 1.0

# Размер сетки интерполяции по умолчанию
IDW_GRID_SIZE = 20

# Минимальный размер сетки интерполяции
MIN_GRID_SIZE = 2

# --- Вывод

# Количество знаков после запятой в координатах выходных документов
OUTPUT_PRECISION = 2

# Каталог профилей относительно корня проекта
PROFILES_DIR = 'configs/profiles'

